"""Core domain logic: exception hierarchy and JSON merge patch."""
