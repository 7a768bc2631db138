"""Shared helpers for the Board Game Atlas client and CLI."""
