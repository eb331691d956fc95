"""HTTP API for the schema overview."""
