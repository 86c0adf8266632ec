"""Shared helpers for oneiromancer tests."""
