"""Probe adapters implementing ProberPort."""
