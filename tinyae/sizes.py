# Layer-width arithmetic for the encoder/decoder pair.
# Text is bit-expanded, so every logical size is scaled by 8 for "string" data.

from __future__ import annotations

import math
from typing import Iterable

from .errors import DataTypeError
from .utils import BITS

DATA_TYPES = ("boolean", "number", "string")


def check_data_type(data_type: str) -> str:
    if data_type not in DATA_TYPES:
        raise DataTypeError(f"Unknown data type '{data_type}'. Use one of {DATA_TYPES}.")
    return data_type


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def effective_size(size: int, data_type: str) -> int:
    return size * BITS if data_type == "string" else size


def transcoded_size(decoded_data_size: int, encoded_data_size: int, data_type: str) -> int:
    """Width of the layers between the decoded and the encoded layer: the midpoint of the two."""
    decoded = effective_size(decoded_data_size, data_type)
    encoded = effective_size(encoded_data_size, data_type)
    return _round_half_up((encoded + decoded) / 2)


def word_size(decoded_data_size: int, data_type: str) -> int:
    # Number of characters a word is padded to. Only meaningful for "string".
    return effective_size(decoded_data_size, data_type) // BITS


def encoder_sizes(decoded_data_size: int, encoded_data_size: int, data_type: str) -> list[int]:
    """
    Full encoder topology [input, hidden..., output]. The middle hidden layer is the
    bottleneck whose activation is the encoded data.
    """
    d = effective_size(decoded_data_size, data_type)
    e = effective_size(encoded_data_size, data_type)
    t = transcoded_size(decoded_data_size, encoded_data_size, data_type)
    return [d, t, e, t, d]


def decoder_sizes(decoded_data_size: int, encoded_data_size: int, data_type: str) -> list[int]:
    d = effective_size(decoded_data_size, data_type)
    e = effective_size(encoded_data_size, data_type)
    t = transcoded_size(decoded_data_size, encoded_data_size, data_type)
    return [e, t, d]


def infer_data_type(data: Iterable, declared: str) -> str:
    """
    Decide the data type for a batch of samples.

    All strings -> "string". No strings -> the declared type, which then must not
    be "string". A mix of both is rejected.
    """
    n_str = 0
    n = 0
    for sample in data:
        n += 1
        if isinstance(sample, str):
            n_str += 1

    if n_str == 0:
        if declared == "string" and n > 0:
            raise DataTypeError("Data type is 'string' but no sample is a string")
        return declared
    if n_str != n:
        raise DataTypeError(f"Mixed samples: {n_str} of {n} are strings")
    return "string"
