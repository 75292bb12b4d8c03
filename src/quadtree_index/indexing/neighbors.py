"""
Neighbor Resolver

Computes the quadkey of the adjacent tile in a cardinal direction.

A one-tile move at the finest level flips the axis bit of the last digit.
When the move leaves the parent tile the flip carries into the next
shallower digit, exactly like carry in a positional increment. The scan
runs from the last digit to the first with a single carry flag, so no
recursion is involved whatever the quadkey length.

Moves off the globe's outer edge are not wrapped: once the carry reaches
the first digit, that digit is flipped and the scan ends. The result is the
tile on the opposite edge of the same row or column.
"""

from typing import Dict, Union

from .types import Direction, validate_quadkey

# direction -> (digits that absorb the carry, step when absorbing, step when carrying)
_CARRY_RULES = {
    Direction.TOP: (frozenset("23"), -2, +2),
    Direction.BOTTOM: (frozenset("01"), +2, -2),
    Direction.RIGHT: (frozenset("02"), +1, -1),
    Direction.LEFT: (frozenset("13"), -1, +1),
}


def neighbor(quadkey: str, direction: Union[Direction, int, str]) -> str:
    """
    Return the quadkey of the neighbor on one side of a tile.

    Args:
        quadkey: Source quadkey, 1 to 31 digits
        direction: Direction member, code 0-3 or name

    Returns:
        Neighbor quadkey of the same length

    Raises:
        InvalidDirectionError: unknown direction
        InvalidQuadKeyLengthError: empty or longer than 31 digits
        InvalidDigitError: a character outside {0, 1, 2, 3}
    """
    direction = Direction.parse(direction)
    validate_quadkey(quadkey)
    absorbing, stop_step, carry_step = _CARRY_RULES[direction]

    digits = list(quadkey)
    carry = True
    for i in range(len(digits) - 1, -1, -1):
        if not carry:
            break
        current = digits[i]
        if current in absorbing:
            digits[i] = str(int(current) + stop_step)
            carry = False
        else:
            digits[i] = str(int(current) + carry_step)

    return "".join(digits)


def neighbors(quadkey: str) -> Dict[Direction, str]:
    """Return all four neighbors keyed by direction."""
    return {direction: neighbor(quadkey, direction) for direction in Direction}


def is_edge(quadkey: str, direction: Union[Direction, int, str]) -> bool:
    """
    Check whether moving in ``direction`` crosses the globe's outer edge.

    For such moves ``neighbor`` returns the tile on the opposite edge rather
    than a true neighbor.
    """
    direction = Direction.parse(direction)
    validate_quadkey(quadkey)
    absorbing = _CARRY_RULES[direction][0]
    return not any(digit in absorbing for digit in quadkey)
