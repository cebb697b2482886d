"""
Service layer.

Each service encapsulates business logic for a domain.  Services
receive the backend gateway and settings from the application rather
than reaching for globals, so API handlers and tests can hand them any
object with the same interface.
"""
