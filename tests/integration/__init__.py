"""Integration tests for the voter and todo services.

These tests exercise the Redis-backed store, on its own and behind the
Voter API:

- Record CRUD against a live Redis server
- Key layout of stored documents
- End-to-end voter and vote flows over HTTP

All tests require a reachable Redis server and are skipped otherwise.
"""
