"""Application layer: services orchestrating the domain through its ports."""
