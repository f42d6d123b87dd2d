"""Core models shared across Mintgate."""
