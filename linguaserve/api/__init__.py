"""HTTP surface for linguaserve."""
