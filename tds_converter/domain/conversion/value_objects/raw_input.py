"""
RawInput Value Object.

One uploaded file as received by the HTTP layer: the original filename
and its bytes. Lives only for the duration of the upload request.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RawInput:
    """
    Immutable uploaded file handed to the conversion use case.

    Attributes:
        display_name: Original filename from the client
        data: Raw file content (excluded from repr)

    Examples:
        >>> raw = RawInput(display_name="report.tds", data=b"a^b\\n")
        >>> raw.size_bytes
        4
    """

    display_name: str
    data: bytes = field(repr=False)

    @property
    def size_bytes(self) -> int:
        """Size of the uploaded content in bytes."""
        return len(self.data)
