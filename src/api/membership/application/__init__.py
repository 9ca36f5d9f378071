"""Application layer for the membership bounded context."""
