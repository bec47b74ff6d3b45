"""propmeta CLI."""
