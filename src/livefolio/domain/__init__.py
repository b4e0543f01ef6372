"""Domain layer - models and view snapshots."""
