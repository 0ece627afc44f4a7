"""Error types raised while building a SOM trainer."""


class SOMError(Exception):
    """Base class for trainer errors."""


class InvalidInputError(SOMError, ValueError):
    """The input source is empty or holds a token that is not a finite number."""


class DimensionMismatchError(InvalidInputError):
    """A record's component count disagrees with the configured input size."""

    def __init__(self, expected: int, got: int, record: int = None):
        self.expected = expected
        self.got = got
        self.record = record
        where = f" in record {record}" if record is not None else ""
        super().__init__(f"Expected {expected} components{where}, got {got}")
