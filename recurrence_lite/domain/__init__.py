"""Preview sessions and error types for presentation surfaces."""
