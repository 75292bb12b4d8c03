"""
Border Enumerator

Lists the quadkeys that line the outside of a tile's four borders at a
chosen subdivision depth.

For each side the outer neighbor tile is found first, then ``depth`` more
digits are appended, keeping only the two sub-quadrants that touch the
shared edge at every step. Results come back side by side (top, bottom,
left, right) and, within a side, in ascending digit order.
"""

from typing import Iterator, List, Tuple

from ..errors import InvalidDepthError
from .neighbors import neighbor
from .types import MAX_BORDER_DEPTH, MAX_LEVEL, Direction, validate_quadkey

SIDE_ORDER = (Direction.TOP, Direction.BOTTOM, Direction.LEFT, Direction.RIGHT)

# side of the source tile -> digits of the neighbor's children touching it
_FACING_DIGITS = {
    Direction.TOP: ("2", "3"),
    Direction.BOTTOM: ("0", "1"),
    Direction.LEFT: ("1", "3"),
    Direction.RIGHT: ("0", "2"),
}


class BorderQuads:
    """
    Lazy, finite sequence of the quadkeys bordering a tile.

    Iterating always recomputes the quadkeys from scratch; the object holds
    only its validated arguments, so it can be iterated any number of times.
    """

    def __init__(self, quadkey: str, depth: int):
        """
        Args:
            quadkey: Source quadkey; 1 to ``31 - depth`` digits
            depth: Extra levels below the neighbor tiles, 0 to 10

        Raises:
            InvalidDepthError: depth outside [0, 10]
            InvalidQuadKeyLengthError: quadkey too short or too deep
            InvalidDigitError: a character outside {0, 1, 2, 3}
        """
        if isinstance(depth, bool) or not isinstance(depth, int) or not 0 <= depth <= MAX_BORDER_DEPTH:
            raise InvalidDepthError(
                f"Depth MUST be in range from 0 to {MAX_BORDER_DEPTH}, got {depth!r}",
                value=depth
            )
        validate_quadkey(quadkey, max_length=MAX_LEVEL - depth)
        self.quadkey = quadkey
        self.depth = depth

    def __iter__(self) -> Iterator[str]:
        for side in SIDE_ORDER:
            yield from self._side(side)

    def __len__(self) -> int:
        return len(SIDE_ORDER) << self.depth

    def __repr__(self) -> str:
        return f"BorderQuads(quadkey={self.quadkey!r}, depth={self.depth})"

    def _side(self, side: Direction) -> Iterator[str]:
        low, high = _FACING_DIGITS[side]
        stack: List[Tuple[str, int]] = [(neighbor(self.quadkey, side), self.depth)]

        while stack:
            prefix, remaining = stack.pop()
            if remaining == 0:
                yield prefix
            else:
                # push high first so the low digit is expanded first
                stack.append((prefix + high, remaining - 1))
                stack.append((prefix + low, remaining - 1))

    def side(self, side: Direction) -> List[str]:
        """Quadkeys along a single side."""
        return list(self._side(Direction.parse(side)))


def border_quads(quadkey: str, depth: int) -> BorderQuads:
    """Return the quadkeys along all four borders of ``quadkey``."""
    return BorderQuads(quadkey, depth)
