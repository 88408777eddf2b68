"""Errors raised by the canonical concept layer."""


class EmbeddingDimensionMismatchError(ValueError):
    """Raw embedding length differs from the cached concepts' dimension."""

    def __init__(self, kind: str, expected: int, actual: int):
        self.kind = kind
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{kind} embedding has {actual} dimensions, cached concepts have {expected}"
        )
