"""PyJWT token codec."""
