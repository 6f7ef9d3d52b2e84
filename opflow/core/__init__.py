"""Settings, logging and shared constants."""
