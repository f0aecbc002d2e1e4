"""Reports module — snapshots, pure aggregation and report endpoints."""
