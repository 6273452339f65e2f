"""
Identifier Encoding: Session Tokens Folded into a Fixed-Width Field

A beacon advertises a session by folding its 12-character token into the
16-bit minor field:

    h = ((h << 5) - h + ord(c)) & mask     for each character c

Many tokens map onto the same field value, which is what the collision
model quantifies.
"""

from __future__ import annotations

import numpy as np

from beaconscale.core import constants as C
from beaconscale.core.errors import ConfigurationError


def fold_token(token: str, bits: int = C.DEFAULT_IDENTIFIER_SPACE_BITS) -> int:
    """Fold a token into an identifier in [0, 2**bits)."""
    if bits <= 0:
        raise ConfigurationError.invalid_value("bits", bits, "must be a positive integer")
    mask = (1 << bits) - 1
    h = 0
    for char in token:
        h = ((h << 5) - h + ord(char)) & mask
    return h


def is_valid_token(token: str, length: int = C.TOKEN_LENGTH) -> bool:
    """Tokens are fixed-length strings over the uppercase alphanumeric alphabet."""
    return len(token) == length and all(c in C.TOKEN_ALPHABET for c in token)


def random_token(
    rng: np.random.Generator,
    length: int = C.TOKEN_LENGTH,
    alphabet: str = C.TOKEN_ALPHABET,
) -> str:
    """Draw one token uniformly from the alphabet."""
    indices = rng.integers(0, len(alphabet), size=length)
    return "".join(alphabet[i] for i in indices)
