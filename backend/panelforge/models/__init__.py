"""Pydantic input and result models."""
