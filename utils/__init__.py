"""Shared utilities: AI gateway client and error types."""
