"""Core configuration, errors, security and request dependencies."""
