"""
Application package initializer.

This package contains the entrypoint for the account management API
and its submodules.  Configuration, the backend gateway and security
dependencies live in ``core``; business operations live in
``services``; request payloads in ``schemas``; and HTTP routes are
grouped under ``api/<version>/``.
"""

from .main import app  # noqa: F401
