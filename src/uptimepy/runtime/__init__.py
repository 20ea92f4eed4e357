"""Long-running components."""
