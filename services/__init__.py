"""Voter and todo record services."""
