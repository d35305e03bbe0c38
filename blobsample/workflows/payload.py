import random
from typing import Callable

PayloadFactory = Callable[[int], bytes]

# Printable characters from '0' up to (not including) 'z'
_FIRST = ord("0")
_SPAN = ord("z") - ord("0")


def random_data(length: int, rng: random.Random = None) -> bytes:
    """Return ``length`` printable pseudo-random bytes. Not for anything security related."""
    rng = rng or random
    return bytes(_FIRST + rng.randrange(_SPAN) for _ in range(length))


def seeded_payload_factory(seed: int) -> PayloadFactory:
    """A payload factory that produces the same bytes on every run."""
    rng = random.Random(seed)
    return lambda length: random_data(length, rng)
