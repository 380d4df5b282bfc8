"""
imageset exception hierarchy.

ImageSetError (base, Exception)
├── ConfigValidationError(ImageSetError, ValueError)   invalid settings
├── StructuralConfigError(ImageSetError)               directory without matching files
└── ImageDecodeError(ImageSetError)                    an image could not be decoded
"""


class ImageSetError(Exception):
    """Base exception for all imageset errors."""


class ConfigValidationError(ImageSetError, ValueError):
    """Configuration value error (usable as ValueError)."""


class StructuralConfigError(ImageSetError):
    """A configured directory holds no file with the expected extension."""

    def __init__(self, directory: str | None, extension: str, reason: str | None = None):
        self.directory = directory
        self.extension = extension
        if directory is None:
            super().__init__(f"No directory configured to search for files of type '{extension}'")
            return
        reason = reason or f"does not contain any files of type '{extension}'"
        super().__init__(f"Directory '{directory}' {reason}")


class ImageDecodeError(ImageSetError):
    """The decode capability failed for a single image path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Could not decode image '{path}'")
