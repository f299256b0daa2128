"""Constants shared across services and API routes."""
