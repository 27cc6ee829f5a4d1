"""Storage adapters for the comments table."""
