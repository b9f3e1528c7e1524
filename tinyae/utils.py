# Small helpers I reuse across modules: the word <-> bit-vector codec and seeding.

from __future__ import annotations

from typing import Sequence

import numpy as np
import torch as th

from .errors import InputSizeError

PAD = " "
BITS = 8


def word_to_vector(word: str, word_length: int = 16) -> np.ndarray:
    """
    Pad `word` with spaces to `word_length` characters and spread every
    character into its 8 bits, least-significant bit first.
    Returns: (word_length * 8,) float32 of 0.0 / 1.0
    """
    if len(word) > word_length:
        raise InputSizeError(f"Word {word!r} has {len(word)} characters, max is {word_length}")
    try:
        raw = word.ljust(word_length, PAD).encode("latin-1")
    except UnicodeEncodeError as e:
        raise ValueError(f"Word {word!r} holds characters outside the 8-bit range") from e

    bits = np.unpackbits(np.frombuffer(raw, dtype=np.uint8), bitorder="little")
    return bits.astype(np.float32)


def vector_to_word(vec: Sequence[float]) -> str:
    """
    Inverse of word_to_vector. Entries are rounded to the nearest bit, so
    fractional network predictions decode too. Trailing padding is dropped.
    """
    v = np.asarray(vec, dtype=np.float32).reshape(-1)
    if v.size % BITS:
        raise InputSizeError(f"Bit vector length {v.size} is not a multiple of {BITS}")

    bits = np.clip(np.rint(v), 0, 1).astype(np.uint8)
    raw = np.packbits(bits, bitorder="little").tobytes()
    # only the space run is padding; other trailing whitespace is data
    return raw.decode("latin-1").rstrip(PAD)


def as_vector(x, width: int, what: str = "input") -> np.ndarray:
    # I accept lists of bools or numbers and any array-like; width is checked here.
    v = np.asarray(x, dtype=np.float32).reshape(-1)
    if v.size != width:
        raise InputSizeError(f"{what} has {v.size} values, expected {width}")
    return v


def set_seed(seed: int = 0) -> None:
    th.manual_seed(seed)
    np.random.seed(seed)
