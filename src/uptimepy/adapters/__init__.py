"""Adapters for ports and web frameworks."""
