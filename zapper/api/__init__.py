"""HTTP API for zapper estimates and the LP price oracle."""
