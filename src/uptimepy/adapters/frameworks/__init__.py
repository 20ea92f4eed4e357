"""Framework adapters exposing the read endpoints."""
