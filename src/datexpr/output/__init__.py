"""Output layer: human and JSON rendering for the CLI."""
