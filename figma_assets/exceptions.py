"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class FigmaAssetsError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(FigmaAssetsError):
    """Raised for issues related to configuration loading or validation."""


class AuthenticationError(FigmaAssetsError):
    """Raised when the Figma API rejects the personal access token."""


class ListingError(FigmaAssetsError):
    """Raised when the asset listing for a file cannot be retrieved."""


class TransportError(FigmaAssetsError):
    """Raised when a single image cannot be fetched and written to disk."""


class DirectoryError(FigmaAssetsError):
    """Raised when a required directory cannot be created or read."""


class UnsupportedFormatError(FigmaAssetsError):
    """Raised when a conversion is requested for an unknown target format."""


class EncoderMissingError(FigmaAssetsError):
    """
    Raised when the external encoder for a target format is not installed.
    """

    def __init__(self, tool: str, guide: str):
        super().__init__(f"Required encoder '{tool}' is not installed.")
        self.tool = tool
        self.guide = guide


class EncodeError(FigmaAssetsError):
    """Raised when an external encoder fails to convert a single file."""
