"""
Core infrastructure: settings, logging, database access and security.
"""
