"""
Service layer abstraction.

Each service encapsulates the business logic and SQL for one resource.
Endpoints call services and translate their exceptions into HTTP
responses; services know nothing about HTTP.
"""
