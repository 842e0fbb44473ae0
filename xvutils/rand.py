"""The Park-Miller "minimal standard" pseudo-random generator."""

from __future__ import annotations

from dataclasses import dataclass

_MASK64 = 0xFFFFFFFFFFFFFFFF


def do_rand(ctx: int) -> int:
    """Advance state ``ctx`` and return the new state, which is also the output.

    Computes ``(7**5 * x) mod (2**31 - 1)`` without overflowing 31 bits;
    the result lies in ``[0, 0x7ffffffd]``.
    """
    x = ((ctx & _MASK64) % 0x7FFFFFFE) + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += 0x7FFFFFFF
    return x - 1


@dataclass
class ParkMiller:
    """A generator holding its own state; the state may be adjusted directly."""

    state: int = 1

    def rand(self) -> int:
        """Return the next number and advance the state."""
        self.state = do_rand(self.state)
        return self.state