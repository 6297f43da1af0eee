"""
LinkUni API package.

Provides the FastAPI application for the LinkUni backend. The application
instance lives in api.app.
"""
