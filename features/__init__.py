"""Feature slices of the dashboard: owner-scoped persistence and dashboard use cases."""
