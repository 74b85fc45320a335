"""
Book Catalog - CRUD HTTP service for a library's books.
"""

__version__ = "1.0.0"
