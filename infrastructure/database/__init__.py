"""SQLite persistence: connection handler, operation mixins and repositories."""
