"""Database access for the SQL state backend."""
