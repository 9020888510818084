"""SQLAlchemy-backed adapters for the user directory and session store."""
