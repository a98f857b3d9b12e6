"""Core security, rate limiting and error types."""
