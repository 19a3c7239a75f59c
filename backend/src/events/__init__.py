"""Event invitation endpoints (donor guest lists)."""
