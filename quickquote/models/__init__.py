"""Domain enums shared by schemas, store, and controller."""
