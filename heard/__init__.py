"""Heard: anonymous church experience sharing backend."""
