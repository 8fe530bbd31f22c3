"""Version parsing and interval models."""
