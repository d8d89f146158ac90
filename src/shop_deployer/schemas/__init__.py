"""Pydantic schemas for network and shop configuration."""
