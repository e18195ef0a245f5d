"""JSON-schema contracts for configuration and emitted artifacts."""
