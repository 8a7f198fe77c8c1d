"""
Top-level package for the Finance Tracker API.

Makes ``finance_tracker_api`` a package so the application can be
imported with fully qualified names such as
``finance_tracker_api.app.main``.  All functionality lives in the
``app`` subpackage.
"""

__all__ = []
