from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """
    Half-open character range [start, end) into the stylesheet source.

    Offsets are Python string indices, so a range slices the source directly.
    """

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"invalid text range ({self.start}, {self.end})")

    @staticmethod
    def empty(offset: int) -> "TextRange":
        """Zero-length range, used for EOF and synthesized tokens."""
        return TextRange(offset, offset)

    def len(self) -> int:
        return self.end - self.start

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def __repr__(self) -> str:
        return f"TextRange({self.start}, {self.end})"


def slice_text_range(source: str, range: TextRange) -> str:
    return source[range.start : range.end]
