"""API route modules for the mod catalog."""
