"""Token generation utility

This module provides a helper function for drawing random, fixed-length
Base62 tokens used as short URL identifiers.

Functions:
    generate_token(length=10, rng=None):
        Draw a random token of `length` characters from [a-zA-Z0-9].

Example:
    >>> from shortie.utils import generate_token
    >>> generate_token(10)  # doctest: +SKIP
    'q7FemOjNr5'
"""

import random
import string

from shortie.constants import Defaults


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits

INDEX_BITS = 6  # 6 bits address 64 >= BASE symbols
INDEX_MASK = (1 << INDEX_BITS) - 1
WORD_BITS = 63
INDICES_PER_WORD = WORD_BITS // INDEX_BITS  # 10 indices fit in one 63-bit word

# Backed by os.urandom, safe to share between threads
_system_random = random.SystemRandom()


def generate_token(length: int = Defaults.TOKEN_LENGTH, rng: random.Random | None = None) -> str:
    """Draw a random token of `length` characters from the Base62 alphabet.

    Every character is chosen independently and uniformly. A 63-bit random
    word is consumed 6 bits at a time; 6-bit values which fall outside the
    alphabet (62 and 63) are discarded instead of being folded back with a
    modulo, so each of the 62 symbols has exactly the same probability.

    Args:
        length (int, optional):
            Number of characters in the token. Defaults to 10.

        rng (random.Random, optional):
            Source of random bits. Defaults to a process-wide
            random.SystemRandom instance. Pass a seeded random.Random
            for reproducible output.

    Returns:
        str: A token matching ^[a-zA-Z0-9]{length}$.

    Example:
        >>> token = generate_token(7, rng=random.Random(42))
        >>> len(token)
        7
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Token length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Token length must be a positive integer (given value: {length}).')

    rng = rng or _system_random
    chars = []
    word, remain = rng.getrandbits(WORD_BITS), INDICES_PER_WORD
    while len(chars) < length:
        if remain == 0:
            word, remain = rng.getrandbits(WORD_BITS), INDICES_PER_WORD
        index = word & INDEX_MASK
        if index < BASE:
            chars.append(ALPHABET[index])
        word >>= INDEX_BITS
        remain -= 1
    return ''.join(chars)
