"""Auth module - password hashing, JWT issuance, login and request context."""
