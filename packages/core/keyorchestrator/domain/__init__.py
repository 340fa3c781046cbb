"""Domain layer: models, components and interfaces."""
