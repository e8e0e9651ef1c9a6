"""Configuration layer: defaults and runtime settings loading."""
