# backend/plaza/__init__.py
from __future__ import annotations

"""
Marks `plaza` as a Python package.

Routers live in plaza/api, repositories and view models in plaza/services.
"""
