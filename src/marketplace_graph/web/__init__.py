"""FastAPI interface for the marketplace graph service."""
