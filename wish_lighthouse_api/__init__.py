"""
Top-level package for the Wish Lighthouse API.

This file makes ``wish_lighthouse_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``wish_lighthouse_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
