"""Library lending service."""
