"""Deployment configuration (environment variables, model names)."""
