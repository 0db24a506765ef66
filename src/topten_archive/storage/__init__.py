"""SQLite persistence: engine, tables and migrations."""
