"""Infrastructure adapters (event bus, observability)."""
