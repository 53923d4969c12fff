"""
Error Hierarchy
===============

Exceptions raised by the heatmap engine.

Only malformed input data is an error. Recording outside a session and
out-of-range configuration are expected conditions and are handled
without raising (ignored and clamped, respectively).
"""


class HeatmapError(Exception):
    """Base error for heatmap operations."""


class DataFormatError(HeatmapError):
    """
    A serialized sample set could not be parsed.

    Raised by import before any engine state is touched, so a failed
    import leaves the previous samples, cells and zones intact.

    Attributes:
        detail: Short human-readable reason
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Malformed sample data: {detail}")
