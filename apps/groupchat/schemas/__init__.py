"""Pydantic schemas shared across the app."""
