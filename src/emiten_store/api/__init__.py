"""API layer: canonical read surface for request handlers.

Key rules:

1. No SQLAlchemy imports - only call repo functions
2. No sorting/filtering here - the repo composes the query
3. Return Pydantic models only
"""
