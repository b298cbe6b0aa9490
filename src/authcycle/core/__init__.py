"""Core: settings, Result type, enums and the composition root."""
