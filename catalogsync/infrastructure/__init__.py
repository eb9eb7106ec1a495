"""Infrastructure layer - HTTP transport, configuration and logging."""
