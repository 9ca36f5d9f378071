"""Infrastructure layer for the membership bounded context."""
