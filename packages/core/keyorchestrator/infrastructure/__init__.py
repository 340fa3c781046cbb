"""Infrastructure layer: transport, authentication, configuration and logging."""
