"""Per-aggregate SQL operation mixins composed into SQLiteDatabaseHandler."""
