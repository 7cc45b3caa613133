"""Legal dashboard backend."""
