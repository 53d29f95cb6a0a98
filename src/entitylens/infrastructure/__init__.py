"""Infrastructure layer: collaborators the domain services consume."""
