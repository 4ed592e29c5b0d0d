"""Domain layer: entities, exceptions, ports and pure parsing rules."""
