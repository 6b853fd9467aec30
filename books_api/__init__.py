"""
FastAPI REST API for the books catalogue.

This package provides:
- CRUD endpoints over a single SQLite-backed books table
- Interactive OpenAPI documentation at /docs
- Environment-driven configuration and structured logging
"""

__version__ = "1.0.0"
