"""Encoders for records and views."""
