"""Configuration — settings, TOML discovery, user settings and logging."""
