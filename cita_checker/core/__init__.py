"""Core infrastructure: settings, logging, errors, retry."""
