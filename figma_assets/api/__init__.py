"""
Figma API Layer.

This package handles all communication with the Figma REST API and turns
its responses into asset records.
"""

from .client import FigmaAPIClient

__all__ = ["FigmaAPIClient"]
