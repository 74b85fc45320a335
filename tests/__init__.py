"""
Book Catalog Test Suite

Tests are organized into:
- unit/: Unit tests for individual components
- integration/: HTTP-level tests against the FastAPI app
"""
