"""Result data models."""
