"""Database configuration and session management."""

from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from walkin_queue.config import settings
from walkin_queue.utils.logger import logger

# Path to alembic.ini relative to this file (walkin_queue/database.py -> alembic.ini)
_ALEMBIC_INI = str(Path(__file__).parent.parent / "alembic.ini")


def build_engine(database_url: str, **kwargs):
    """Create an engine, applying the SQLite settings the service relies on."""
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        # Writers wait for the database lock instead of failing immediately
        connect_args.setdefault("timeout", 30)
        engine = create_engine(database_url, connect_args=connect_args, **kwargs)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(database_url, pool_pre_ping=True, **kwargs)


# Create engine
engine = build_engine(settings.database_url, echo=settings.debug)

# Create session factory
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

# Create base class for models
Base = declarative_base()


def init_db():
    """Initialize database using Alembic migrations, then seed if empty.

    Strategy:
    - Fresh DB (no tables): create_all() for full schema, then stamp Alembic at head.
    - Existing DB without alembic_version: stamp at head.
    - Existing DB with alembic_version: upgrade to apply pending migrations.
    - No alembic.ini (installed package, tests): fall back to create_all() only.
    """
    import walkin_queue.models  # noqa: F401 - register all models with Base.metadata

    alembic_ini = Path(_ALEMBIC_INI)
    if alembic_ini.exists():
        try:
            from alembic.config import Config
            from alembic import command
            from sqlalchemy import inspect, text

            alembic_cfg = Config(str(alembic_ini))
            alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
            alembic_cfg.attributes["configure_logger"] = False
            inspector = inspect(engine)
            has_tables = bool(inspector.get_table_names())
            has_alembic = inspector.has_table("alembic_version")

            alembic_has_revision = False
            if has_alembic:
                with engine.connect() as conn:
                    row = conn.execute(text("SELECT version_num FROM alembic_version LIMIT 1")).first()
                    alembic_has_revision = row is not None

            if not has_tables:
                Base.metadata.create_all(bind=engine)
                command.stamp(alembic_cfg, "head")
                logger.info("Fresh database initialized and stamped at Alembic head")
            elif not alembic_has_revision:
                command.stamp(alembic_cfg, "head")
                logger.info("Stamped existing database at Alembic head")
            else:
                command.upgrade(alembic_cfg, "head")
                logger.info("Database migrations applied successfully")
        except Exception as e:
            logger.error(f"Error running database migrations: {e}")
            raise
    else:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created with create_all (no alembic.ini found)")

    from walkin_queue.seed import seed_if_empty
    seed_if_empty(engine)
