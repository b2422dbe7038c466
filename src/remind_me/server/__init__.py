"""HTTP API for Remind Me."""
