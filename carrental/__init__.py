"""Car rental service."""
