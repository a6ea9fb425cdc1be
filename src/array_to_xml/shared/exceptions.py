"""Exceptions raised while converting a value tree into XML.

Every error aborts the whole conversion call; no partial document is
returned.
"""

from typing import Optional


class ConversionError(Exception):
    """Base exception for conversion errors."""


class RootMustBeAssociativeError(ConversionError):
    """Raised when the top-level input is not an associative collection."""

    def __init__(self, value_type: str) -> None:
        super().__init__(f"Root element must be associative, got {value_type}")
        self.value_type = value_type


class InvalidNameError(ConversionError):
    """Raised when an element or attribute name is rejected.

    ``name`` is the exact offending token: the full key for a bad element
    name, the attribute name alone for a bad attribute.
    """

    def __init__(
        self,
        message: str,
        name: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(f"{message}: {name!r}")
        self.name = name
        self.cause = cause


class InvalidContentError(ConversionError):
    """Raised when a leaf value holds characters XML cannot represent."""

    def __init__(self, message: str, name: str) -> None:
        super().__init__(f"{message}: {name!r}")
        self.name = name


class MaxDepthExceededError(ConversionError):
    """Raised when the input nests deeper than the configured limit."""

    def __init__(self, depth: int, limit: int) -> None:
        super().__init__(f"Input nesting depth {depth} exceeds limit {limit}")
        self.depth = depth
        self.limit = limit


class InvalidDocumentError(ConversionError):
    """Raised when the converted input does not yield exactly one root element."""

    def __init__(self, root_count: int) -> None:
        super().__init__(
            f"Document must have exactly one root element, got {root_count}"
        )
        self.root_count = root_count
