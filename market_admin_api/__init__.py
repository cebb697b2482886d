"""
Top‑level package for the Market Admin API.

This file makes ``market_admin_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``market_admin_api.app.main``.  Without this marker file, import
resolution for ``market_admin_api`` would fail when running tests
outside of the package root.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
