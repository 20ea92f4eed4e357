"""Core domain: models, ports, timezone and aggregation logic."""
