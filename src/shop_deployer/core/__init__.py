"""Core infrastructure: configuration, logging and database engine."""
