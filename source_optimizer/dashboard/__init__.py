"""Web API for the source optimizer."""
