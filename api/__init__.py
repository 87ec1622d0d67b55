"""
HTTP surface for VisionLens.

Routers are mounted by main.py.
"""

from .tasks import router

__all__ = ["router"]
