"""evalboard test suite."""
