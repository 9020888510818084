"""Password hashing and verification."""
