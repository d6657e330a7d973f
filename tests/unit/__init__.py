"""Unit tests that need no external services."""
