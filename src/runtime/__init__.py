"""
Knife Hit Runtime.

Asyncio scheduling of rotation and throw pacing.
"""

from src.runtime.driver import GameDriver

__all__ = ["GameDriver"]
