"""HTTP API blueprint."""
