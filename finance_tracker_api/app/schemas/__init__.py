"""
Pydantic schema definitions for API payloads.

Each resource (users, accounts, categories, transactions, summary)
defines its own request and response models.  Schemas are kept apart
from the SQL in the services so the API representation can change
independently of the storage layout.
"""
