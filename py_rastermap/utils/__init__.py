"""Shared helpers: random sequence and logging setup."""
