"""
Pydantic schema definitions for API payloads.

``vendor`` describes rows of the ``vendors`` table; ``account`` holds
the request bodies of the account management operations.  Schemas are
kept apart from the backend gateway, which exchanges plain dicts with
the record store.
"""
