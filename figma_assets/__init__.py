"""Export Figma image assets and transcode them to modern formats."""

__version__ = "0.3.0"
