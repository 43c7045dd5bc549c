"""Configuration, credentials and error types."""
