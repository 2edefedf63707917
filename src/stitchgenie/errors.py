"""
Error conditions raised by the Stitch Genie engine.

All input-validation failures also derive from ValueError so callers that
already guard pipeline calls with ``except ValueError`` keep working.
"""


class StitchGenieError(Exception):
    """Base exception for all Stitch Genie errors."""


class InvalidImage(StitchGenieError, ValueError):
    """Source image is empty or has an unusable pixel layout."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"Invalid image: {reason}")


class InvalidConfig(StitchGenieError, ValueError):
    """A generation or layout parameter is out of range."""

    def __init__(self, field, value, reason):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config '{field}'={value!r}: {reason}")


class InvalidTarget(StitchGenieError, ValueError):
    """Render target has no drawable area."""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        super().__init__(f"Invalid render target {width}x{height}: area must be positive")
