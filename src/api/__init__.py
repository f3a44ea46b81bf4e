"""HTTP API for StudySpark."""
