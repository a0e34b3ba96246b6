"""Pydantic output models."""
