"""
Random number generation for wall shuffling and dealer selection.

Each game carries a hex seed. Every hand derives its own random.Random from
SHA-512(domain prefix + seed + hand serial), so a game is reproducible from
its seed while hands stay independent of each other. The wall shuffle is a
Fisher-Yates pass over that generator.
"""

from __future__ import annotations

import hashlib
import random
import secrets
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Sequence

SEED_BYTES = 32
NUM_SEATS = 4
_HAND_DOMAIN_PREFIX = b"colorjong-hand-v1:"
_STRATEGY_DOMAIN_PREFIX = b"colorjong-strategy-v1:"

T = TypeVar("T")


def validate_seed_hex(seed_hex: str) -> None:
    """Validate that a seed string is the correct hex format.

    Raises TypeError for non-string input, ValueError for invalid format.
    """
    if not isinstance(seed_hex, str):
        raise TypeError(f"Seed must be a string, got {type(seed_hex).__name__}")
    expected_length = SEED_BYTES * 2
    if len(seed_hex) != expected_length:
        raise ValueError(f"Seed must be exactly {expected_length} hex characters, got {len(seed_hex)}")
    try:
        bytes.fromhex(seed_hex)
    except ValueError:
        raise ValueError("Seed contains invalid hex characters") from None


def generate_seed() -> str:
    """Generate a cryptographic seed as a hex string."""
    return secrets.token_bytes(SEED_BYTES).hex()


def _derive_rng(domain_prefix: bytes, seed_hex: str, counter: int) -> random.Random:
    if not (0 <= counter < 2**32):
        raise ValueError("counter must be in [0, 2^32)")
    validate_seed_hex(seed_hex)
    digest = hashlib.sha512(domain_prefix + bytes.fromhex(seed_hex) + counter.to_bytes(4, "little")).digest()
    return random.Random(int.from_bytes(digest, "little"))  # noqa: S311


def create_hand_rng(seed_hex: str, hand_serial: int) -> random.Random:
    """Derive the generator used to shuffle the wall (and pick a dealer) for one hand."""
    return _derive_rng(_HAND_DOMAIN_PREFIX, seed_hex, hand_serial)


def create_strategy_rng(seed_hex: str, seat: int) -> random.Random:
    """Derive an independent generator for one AI seat."""
    return _derive_rng(_STRATEGY_DOMAIN_PREFIX, seed_hex, seat)


def fisher_yates_shuffle(items: Sequence[T], rng: random.Random) -> list[T]:
    """
    Return a uniformly shuffled copy of items.

    For i from n-1 down to 1: swap items[i] with items[randint(0, i)].
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def determine_dealer(rng: random.Random) -> int:
    """Pick the first dealer of a set uniformly among the four seats."""
    return rng.randrange(NUM_SEATS)
