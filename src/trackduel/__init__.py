"""trackduel - rank tracks through round-robin head-to-head battles."""

__version__ = "0.1.0"
