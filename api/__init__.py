"""Serverless entry point: api/index.py exposes the FastAPI app."""
