"""
Storage Layer.

This package handles configuration persistence. Downloaded and converted
images are written directly by the media layer.
"""

from .config_manager import ConfigManager

__all__ = ["ConfigManager"]
