"""Heard application package."""
