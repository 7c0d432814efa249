"""Core configuration, dependencies and security."""
