"""
Media Processing Layer.

This package is responsible for all image file operations: fetching rendered
images over HTTP and transcoding them with external encoders.
"""

from .downloader import Downloader
from .encoder import ImageEncoder

__all__ = ["Downloader", "ImageEncoder"]
