"""
Application package.

The code is split by concern: ``core`` holds settings, logging,
database access and security; ``schemas`` the pydantic models;
``services`` the business logic and SQL; ``api`` the versioned HTTP
routers.  Each resource (accounts, categories, transactions, summary)
has one module in each layer.
"""

from .main import app  # noqa: F401
