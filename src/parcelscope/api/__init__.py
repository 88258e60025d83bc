"""HTTP API for parcelscope (FastAPI)."""
