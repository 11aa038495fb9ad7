"""Route-driven notification service."""
