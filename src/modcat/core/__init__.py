"""Core functionality for modcat: configuration and the catalog itself."""
