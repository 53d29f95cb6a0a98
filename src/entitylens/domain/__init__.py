"""Domain layer: entities, services and exceptions."""
