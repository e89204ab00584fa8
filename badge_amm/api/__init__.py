"""HTTP API for the badge market."""
