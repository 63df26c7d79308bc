"""Exception handlers and request middleware."""
