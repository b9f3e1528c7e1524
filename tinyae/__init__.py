"""tinyae

A minimal autoencoder: an encoder network whose bottleneck activation is the
encoded data, a decoder network trained to rebuild the input from it, and a
bit codec so the pair can be trained on short words.
"""

from .autoencoder import AutoEncoder
from .config import Config, TrainOptions
from .errors import (
    AutoEncoderError,
    DataTypeError,
    EngineTrainingError,
    InputSizeError,
    SizeMismatchError,
    UnsupportedOperationError,
)
from .model_network import FeedForward
from .sizes import DATA_TYPES
from .utils import vector_to_word, word_to_vector
