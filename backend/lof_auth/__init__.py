"""Lots-of-Fun authentication service.

``from lof_auth import create_app`` builds the Flask application.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
