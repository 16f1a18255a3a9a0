"""Render provider implementations"""

from .shotstack import ShotstackRenderProvider

__all__ = [
    "ShotstackRenderProvider",
]
