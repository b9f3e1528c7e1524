# Error types surfaced by the autoencoder and its networks.
# Each one also derives from the builtin a caller would naturally catch.


class AutoEncoderError(Exception):
    pass


class UnsupportedOperationError(AutoEncoderError, NotImplementedError):
    pass


class SizeMismatchError(AutoEncoderError, ValueError):
    pass


class InputSizeError(AutoEncoderError, ValueError):
    pass


class DataTypeError(AutoEncoderError, TypeError):
    pass


class EngineTrainingError(AutoEncoderError, RuntimeError):
    pass
