"""Core business logic for HQ."""
