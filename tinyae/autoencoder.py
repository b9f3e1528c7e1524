# Encoder/decoder pair trained as an autoencoder.
# The encoder learns the identity and its bottleneck layer is read back as the encoded data.
# The decoder then learns to rebuild the original input from that bottleneck.

from __future__ import annotations

import json
from typing import Any, Iterable, Union

import numpy as np

from .config import Config, TrainOptions
from .errors import DataTypeError, SizeMismatchError, UnsupportedOperationError
from .model_network import FeedForward
from .sizes import (
    check_data_type,
    decoder_sizes,
    effective_size,
    encoder_sizes,
    infer_data_type,
    transcoded_size,
    word_size,
)
from .utils import as_vector, set_seed, vector_to_word, word_to_vector

DecodedData = Union[str, np.ndarray, list]


def _check_size(label: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
        raise ValueError(f"{label} must be a positive integer, got {value!r}")
    return int(value)


def _read_header(obj: dict) -> tuple[int, int, str]:
    missing = [k for k in ("decodedDataSize", "encodedDataSize", "encoder", "decoder") if k not in obj]
    if missing:
        raise ValueError(f"Autoencoder JSON is missing {missing}")
    return (
        _check_size("decodedDataSize", obj["decodedDataSize"]),
        _check_size("encodedDataSize", obj["encodedDataSize"]),
        check_data_type(obj.get("dataType", "number")),
    )


class AutoEncoder:
    """
    Two coupled feed-forward networks: an encoder that compresses data into a
    smaller vector, and a decoder that reconstructs the data from it.

    The encoder is shaped [decoded, transcoded, encoded, transcoded, decoded] and
    trained to reproduce its input; encode() returns its middle (bottleneck)
    activation. The decoder is shaped [encoded, transcoded, decoded] and is trained
    on whatever the encoder currently produces.

    Strings are handled bit by bit, so with data_type="string" every logical size
    counts characters and the networks are 8x wider.

    Example:
        ae = AutoEncoder(10, 1, "string")
        ae.train(["this", "is", "an", "example"])
        encoded = ae.encode("example")
        print(encoded, "->", ae.decode(encoded))
    """

    # Index of the bottleneck in the encoder's activations (0 is the input layer)
    LATENT_LAYER = 2

    def __init__(
        self,
        decoded_data_size: int,
        encoded_data_size: int,
        data_type: str = "number",
        cfg: Config | None = None,
    ):
        self._decoded_data_size = _check_size("decoded_data_size", decoded_data_size)
        self._encoded_data_size = _check_size("encoded_data_size", encoded_data_size)
        self._data_type = check_data_type(data_type)
        self.cfg = cfg or Config()

        # Set once the weights stop being the random defaults
        self._trained = False
        self._build()

    def _build(self) -> None:
        if self.cfg.seed is not None:
            set_seed(self.cfg.seed)

        enc = encoder_sizes(self._decoded_data_size, self._encoded_data_size, self._data_type)
        dec = decoder_sizes(self._decoded_data_size, self._encoded_data_size, self._data_type)
        self.encoder = FeedForward(enc[0], enc[1:-1], enc[-1], cfg=self.cfg, name="encoder")
        self.decoder = FeedForward(dec[0], dec[1:-1], dec[-1], cfg=self.cfg, name="decoder")

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(decoded_data_size={self._decoded_data_size}, "
            f"encoded_data_size={self._encoded_data_size}, data_type={self._data_type!r})"
        )

    # ---- Sizes -----------------------------------------------------------------

    @property
    def data_type(self) -> str:
        return self._data_type

    @property
    def decoded_data_size(self) -> int:
        return self._decoded_data_size

    @property
    def encoded_data_size(self) -> int:
        return self._encoded_data_size

    @property
    def transcoded_data_size(self) -> int:
        # logical midpoint, before any bit expansion
        return transcoded_size(self._decoded_data_size, self._encoded_data_size, "number")

    @property
    def decoded_size(self) -> int:
        return effective_size(self._decoded_data_size, self._data_type)

    @property
    def encoded_size(self) -> int:
        return effective_size(self._encoded_data_size, self._data_type)

    @property
    def transcoded_size(self) -> int:
        return transcoded_size(self._decoded_data_size, self._encoded_data_size, self._data_type)

    @property
    def word_size(self) -> int:
        return word_size(self._decoded_data_size, self._data_type)

    # ---- Inference -------------------------------------------------------------

    def _to_vector(self, sample) -> np.ndarray:
        if self._data_type == "string":
            if not isinstance(sample, str):
                raise DataTypeError(f"Expected a string, got {type(sample).__name__}")
            return word_to_vector(sample, self.word_size)
        if isinstance(sample, str):
            raise DataTypeError(
                f"Got a string but the data type is '{self._data_type}'. "
                "Construct with data_type='string' or train on strings first."
            )
        return as_vector(sample, self.decoded_size, "data")

    def encode(self, data: DecodedData) -> np.ndarray:
        """Encode data into a vector of `encoded_size` values."""
        self.encoder.run(self._to_vector(data))
        return self.encoder.activation(self.LATENT_LAYER)

    def decode(self, encoded_data) -> DecodedData:
        """
        Decode an encoded vector back into data of this instance's type:
        a string, an array of bools, or an array of numbers.
        """
        v = as_vector(encoded_data, self.encoded_size, "encoded data")
        out = self.decoder.run(v)

        if self._data_type == "string":
            return vector_to_word(out)
        if self._data_type == "boolean":
            return out >= 0.5
        return out

    def run(self, data: DecodedData) -> DecodedData:
        return self.decode(self.encode(data))

    def validate(self, data: DecodedData) -> bool:
        """
        Check that decoding the encoded data reproduces it. Strings only; trailing
        spaces are padding and are not compared.
        """
        if self._data_type != "string":
            raise UnsupportedOperationError(f"validate() is not implemented for data type '{self._data_type}'")
        return self.run(data) == data.rstrip(" ")

    # ---- Training --------------------------------------------------------------

    def infer(self, data: Iterable) -> str:
        """
        Settle the data type for `data`. This is the only place the type can change:
        an untrained instance that receives strings becomes a "string" autoencoder and
        its (still random) networks are rebuilt at the bit-expanded widths.
        """
        data_type = infer_data_type(data, self._data_type)
        if data_type != self._data_type:
            if self._trained:
                raise DataTypeError(
                    f"Cannot switch a trained '{self._data_type}' autoencoder to '{data_type}' data"
                )
            self._data_type = data_type
            self._build()
        return self._data_type

    def train(self, data: Iterable[DecodedData], options: dict[str, Any] | TrainOptions | None = None) -> dict:
        """
        Train the encoder, then the decoder.

        Options: error_thresh, iterations, learning_rate (plus momentum, weight_decay,
        batch_size, optimizer, log, log_period). Unknown keys pass through.
        Returns: {"encoder": stats, "decoder": stats}
        """
        data = list(data)
        if not data:
            raise ValueError("Training data is empty")
        opts = TrainOptions.build(self.cfg, options)

        self.infer(data)
        stats = {"encoder": self._train_encoder(data, opts)}
        self._trained = True
        stats["decoder"] = self._train_decoder(data, opts)
        return stats

    def _train_encoder(self, data: list, opts: TrainOptions) -> dict:
        pairs = []
        for sample in data:
            v = self._to_vector(sample)
            pairs.append((v, v))
        return self.encoder.fit(pairs, opts)

    def _train_decoder(self, data: list, opts: TrainOptions) -> dict:
        # Inputs are regenerated from the encoder as it is right now, never cached
        pairs = [(self.encode(sample), self._to_vector(sample)) for sample in data]
        return self.decoder.fit(pairs, opts)

    # ---- Serialization ---------------------------------------------------------

    def to_json(self) -> dict:
        return {
            "decodedDataSize": self._decoded_data_size,
            "encodedDataSize": self._encoded_data_size,
            "dataType": self._data_type,
            "encoder": self.encoder.to_json(),
            "decoder": self.decoder.to_json(),
        }

    def stringify(self) -> str:
        return json.dumps(self.to_json())

    def from_json(self, obj: dict | str) -> AutoEncoder:
        """Load sizes, data type and both networks. The saved topology must fit this instance."""
        if isinstance(obj, str):
            obj = json.loads(obj)
        decoded, encoded, data_type = _read_header(obj)

        enc = encoder_sizes(decoded, encoded, data_type)
        dec = decoder_sizes(decoded, encoded, data_type)
        for name, expected in (("encoder", enc), ("decoder", dec)):
            saved = [int(s) for s in obj[name].get("sizes", [])]
            if saved != expected:
                raise SizeMismatchError(
                    f"Saved {name} sizes {saved} disagree with decodedDataSize={decoded}, "
                    f"encodedDataSize={encoded}, dataType={data_type!r} (expected {expected})"
                )

        if enc != self.encoder.sizes or dec != self.decoder.sizes:
            raise SizeMismatchError(
                f"Saved autoencoder ({decoded}, {encoded}, {data_type!r}) does not fit {self!r}; "
                "use AutoEncoder.parse() to rebuild it"
            )

        # Both networks are checked before either one is written
        enc_weights = self.encoder.check_json(obj["encoder"])
        dec_weights = self.decoder.check_json(obj["decoder"])
        self.encoder.load_weights(*enc_weights)
        self.decoder.load_weights(*dec_weights)
        self._decoded_data_size = decoded
        self._encoded_data_size = encoded
        self._data_type = data_type
        self._trained = True
        return self

    @classmethod
    def parse(cls, json_string: str, cfg: Config | None = None) -> AutoEncoder:
        obj = json.loads(json_string)
        decoded, encoded, data_type = _read_header(obj)
        return cls(decoded, encoded, data_type, cfg=cfg).from_json(obj)
