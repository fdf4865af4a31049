"""Application services (one instance per ServiceContainer)."""
