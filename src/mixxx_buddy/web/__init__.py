"""FastAPI surface publishing the current session snapshot."""
