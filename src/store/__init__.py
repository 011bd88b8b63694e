"""SQLite persistence for normalized placement records."""
