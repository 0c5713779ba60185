"""Self-hosted file drop service."""
