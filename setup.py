"""Setup script for the walk-in queue service."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="walkin-queue",
    version="1.0.0",
    description="Walk-in client queue with daily queue numbers and multi-window serving",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["walkin_queue", "walkin_queue.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn[standard]>=0.27.0",
        "sqlalchemy>=2.0.0",
        "alembic>=1.12.0",
        "click>=8.1.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
        "loguru>=0.7.0",
        "python-jose[cryptography]>=3.3.0",
        "bcrypt>=4.0.0",
        "slowapi>=0.1.9",
        "tzdata>=2024.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "walkin-queue=walkin_queue.cli:cli",
        ],
    },
)
