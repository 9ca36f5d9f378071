"""Domain layer for the membership context (no infrastructure imports)."""
