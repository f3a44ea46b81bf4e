"""StudySpark: study-assistant backend and terminal client."""
