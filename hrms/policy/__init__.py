"""Group working-hours policy: schemas, file store and settings endpoints."""
