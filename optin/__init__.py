"""Double opt-in mailing list service."""
