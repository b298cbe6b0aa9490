"""Domain layer: entities, enums, errors, events and protocols (ports)."""
