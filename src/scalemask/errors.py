"""Error taxonomy for the overlay pipeline.

Recoverable errors are handled where they occur:
- CalibrationSampleError: a legend row is skipped
- ImageIOError: a single image fails, the batch continues

Fatal errors stop the whole run before any image is processed:
- MissingReferenceImage
- MissingArguments

Pipeline bugs are not listed here; see ``scalemask.contracts.ContractViolation``.
"""


class ScalemaskError(Exception):
    """Base class for all scalemask errors."""


class CalibrationSampleError(ScalemaskError):
    """Average color of a legend row could not be sampled."""


class OutOfBounds(CalibrationSampleError):
    """Sample row or column lies outside the image."""


class EmptySpan(CalibrationSampleError):
    """Sample span contains no pixels (x_end < x_start)."""


class ImageIOError(ScalemaskError):
    """Image could not be read from or written to disk."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ImageDecodeError(ImageIOError):
    """Image source failed to decode a file."""


class ImageEncodeError(ImageIOError):
    """Image sink failed to encode or write a file."""


class MissingReferenceImage(ScalemaskError):
    """Calibration (legend) image does not exist."""

    def __init__(self, path):
        self.path = str(path)
        super().__init__(
            f"Reference image {self.path} does not exist (required for calibration). "
            "Place it next to the images or pass --reference."
        )


class MissingArguments(ScalemaskError):
    """No target images were supplied."""

    def __init__(self):
        super().__init__("Provide at least one image path to process.")
