"""Terminal client for StudySpark."""
