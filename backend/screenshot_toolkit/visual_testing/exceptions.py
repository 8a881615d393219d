"""
Image comparison exceptions
"""

from screenshot_toolkit.core.exceptions import ToolkitError


class ComparisonError(ToolkitError):
    """
    Image comparison failed

    Attributes:
        stage: Pipeline stage that failed (read, decode, normalize, diff, encode, write)
    """

    def __init__(self, message: str, stage: str = "", recovery_hint: str = ""):
        self.stage = stage
        if stage:
            message = f"{stage} stage failed: {message}"
        super().__init__(message, component="Comparison", recovery_hint=recovery_hint)


class ImageIOError(ComparisonError):
    """Source image unreadable or diff output unwritable"""

    def __init__(self, message: str, stage: str = "read", recovery_hint: str = ""):
        super().__init__(
            message,
            stage=stage,
            recovery_hint=recovery_hint or "Check that the file exists and is accessible",
        )


class ImageDecodeError(ComparisonError):
    """Image data is malformed, unsupported, or has no usable dimensions"""

    def __init__(self, message: str, stage: str = "decode", recovery_hint: str = ""):
        super().__init__(
            message,
            stage=stage,
            recovery_hint=recovery_hint or "Provide a valid raster image (PNG, JPEG, WebP, ...)",
        )
