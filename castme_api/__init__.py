"""
Top‑level package for the CastMe API.

This file makes ``castme_api`` a Python package so that modules within
``app`` can be imported using fully qualified names like
``castme_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
