"""Cooperative continuation runtime and an on-demand module loader built on it."""
