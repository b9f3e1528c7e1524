# Central configuration for the networks and their training defaults.
# Allowed activation and optimizer names live here as tuples next to the dataclasses.

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Union

ACTIVATIONS = ("sigmoid", "relu", "leaky-relu", "tanh")
OPTIMIZERS = ("adam", "sgd")

# brain-style option names people tend to carry over from serialized runs
_ALIASES = {
    "errorThresh": "error_thresh",
    "learningRate": "learning_rate",
    "logPeriod": "log_period",
    "batchSize": "batch_size",
    "weightDecay": "weight_decay",
}


@dataclass
class Config:
    # Network settings
    activation: str = "sigmoid"
    dropout: float = 0.0
    device: str = "cpu"
    seed: int | None = None

    # Training defaults (overridable per train() call)
    error_thresh: float = 0.005
    iterations: int = 20000
    learning_rate: float = 1e-2
    momentum: float = 0.1
    weight_decay: float = 0.0
    batch_size: int = 256
    optimizer: str = "adam"

    # Progress output
    log: bool = False
    log_period: int = 10

    def __post_init__(self):
        if self.activation not in ACTIVATIONS:
            raise ValueError(f"Unknown activation '{self.activation}'. Use one of {ACTIVATIONS}.")
        if not (0.0 <= self.dropout < 1.0):
            raise ValueError(f"dropout must be in [0, 1), got {self.dropout}")


LogSink = Union[bool, Callable[[str], None]]


@dataclass
class TrainOptions:
    """Options for one training call.

    Recognized keys stop training (`error_thresh`, `iterations`) or shape the
    weight updates (`learning_rate`, `momentum`, `weight_decay`,
    `batch_size`, `optimizer`). Anything else lands in `extra` untouched; the
    torch engine forwards the keys its optimizer accepts (`betas`, `eps`,
    `nesterov`, ...) and ignores the rest.
    """

    error_thresh: float = 0.005
    iterations: int = 20000
    learning_rate: float = 1e-2
    momentum: float = 0.1
    weight_decay: float = 0.0
    batch_size: int = 256
    optimizer: str = "adam"
    log: LogSink = False
    log_period: int = 10
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def build(cls, cfg: Config, overrides: dict[str, Any] | TrainOptions | None = None) -> TrainOptions:
        if isinstance(overrides, TrainOptions):
            overrides.check()
            return overrides

        known = {f.name for f in fields(cls)} - {"extra"}
        values = {k: getattr(cfg, k) for k in known}
        extra = {}
        for k, v in (overrides or {}).items():
            name = _ALIASES.get(k, k)
            if name in known:
                values[name] = v
            else:
                extra[k] = v

        opts = cls(**values, extra=extra)
        opts.check()
        return opts

    def check(self) -> None:
        if int(self.iterations) <= 0:
            raise ValueError(f"iterations must be positive, got {self.iterations}")
        if float(self.error_thresh) < 0:
            raise ValueError(f"error_thresh must be >= 0, got {self.error_thresh}")
        if float(self.learning_rate) <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if int(self.batch_size) <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if int(self.log_period) <= 0:
            raise ValueError(f"log_period must be positive, got {self.log_period}")
        if str(self.optimizer).lower() not in OPTIMIZERS:
            raise ValueError(f"Unknown optimizer '{self.optimizer}'. Use one of {OPTIMIZERS}.")
