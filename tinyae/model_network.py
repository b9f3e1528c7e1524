# Feed-forward network used for both halves of the autoencoder.
# I keep every layer's activation from the last run so the bottleneck can be read back.

from __future__ import annotations

import inspect
import math
from typing import Sequence

import numpy as np
import torch as th
import torch.nn as nn
from torch.utils.data import TensorDataset, DataLoader

from .config import Config, TrainOptions
from .errors import EngineTrainingError, SizeMismatchError
from .utils import as_vector

_ACTIVATIONS = {
    "sigmoid": nn.Sigmoid,
    "relu": nn.ReLU,
    "leaky-relu": nn.LeakyReLU,
    "tanh": nn.Tanh,
}


def _emit(sink, line: str) -> None:
    if callable(sink):
        sink(line)
    else:
        print(line)


class FeedForward(nn.Module):
    """
    Dense network with sizes [input, *hidden_layers, output].

    Every layer, the output layer included, is Linear followed by the configured
    activation, so a sigmoid network predicts values in [0, 1]. Layer 0 is the
    input layer when reading activations back.
    """

    def __init__(
        self,
        input_size: int,
        hidden_layers: Sequence[int] = (),
        output_size: int = 1,
        cfg: Config | None = None,
        name: str = "network",
    ):
        super().__init__()
        self.cfg = cfg or Config()
        self.name = name
        self.sizes = [int(input_size), *(int(h) for h in hidden_layers), int(output_size)]
        if min(self.sizes) <= 0:
            raise ValueError(f"{name}: layer sizes must be positive, got {self.sizes}")

        self.activation_name = self.cfg.activation
        self.layers = nn.ModuleList(
            nn.Linear(d_in, d_out) for d_in, d_out in zip(self.sizes[:-1], self.sizes[1:])
        )
        self.act = _ACTIVATIONS[self.activation_name]()
        self.drop = nn.Dropout(self.cfg.dropout)

        # Activations of the last run(), input layer first
        self.outputs: list[np.ndarray] = []
        self.to(self.cfg.device)

    @property
    def device(self) -> th.device:
        return next(self.parameters()).device

    @property
    def input_size(self) -> int:
        return self.sizes[0]

    @property
    def output_size(self) -> int:
        return self.sizes[-1]

    @property
    def hidden_layers(self) -> list[int]:
        return self.sizes[1:-1]

    def forward(self, x: th.Tensor):
        # I return the output plus every intermediate activation.
        acts = [x]
        h = x
        last = len(self.layers) - 1
        for i, layer in enumerate(self.layers):
            h = self.act(layer(h))
            if i < last:
                h = self.drop(h)
            acts.append(h)
        return h, acts

    def run(self, x) -> np.ndarray:
        v = as_vector(x, self.input_size, f"{self.name} input")
        t = th.as_tensor(v, device=self.device).unsqueeze(0)

        self.eval()
        with th.no_grad():
            _, acts = self(t)

        self.outputs = [a[0].detach().cpu().numpy() for a in acts]
        return self.outputs[-1].copy()

    def activation(self, layer: int) -> np.ndarray:
        """Activation of `layer` recorded by the last run()."""
        if not self.outputs:
            raise RuntimeError(f"{self.name}: run() has not been called yet")
        if not 0 <= layer < len(self.outputs):
            raise IndexError(f"{self.name}: layer {layer} out of range (0..{len(self.outputs) - 1})")
        return self.outputs[layer].copy()

    def _optimizer(self, opts: TrainOptions) -> th.optim.Optimizer:
        # Extra options the optimizer understands (betas, eps, nesterov, ...) go straight to it;
        # anything else is left for other engines and ignored here.
        kwargs = {"lr": float(opts.learning_rate), "weight_decay": float(opts.weight_decay)}
        if str(opts.optimizer).lower() == "sgd":
            cls = th.optim.SGD
            kwargs["momentum"] = float(opts.momentum)
        else:
            cls = th.optim.Adam
        accepted = inspect.signature(cls).parameters
        kwargs.update({k: v for k, v in opts.extra.items() if k in accepted and k not in ("params", "lr")})
        return cls(self.parameters(), **kwargs)

    def fit(self, pairs: Sequence[tuple], options: TrainOptions | None = None) -> dict:
        """
        Supervised training on (input, target) pairs with MSE loss.
        Stops after `iterations` epochs or once the epoch error drops below `error_thresh`.
        Returns: {"error": last epoch error, "iterations": epochs run}
        """
        opts = options if options is not None else TrainOptions.build(self.cfg)
        if len(pairs) == 0:
            raise ValueError(f"{self.name}: training set is empty")

        X = np.stack([as_vector(i, self.input_size, f"{self.name} training input") for i, _ in pairs])
        Y = np.stack([as_vector(o, self.output_size, f"{self.name} training target") for _, o in pairs])
        if not (np.isfinite(X).all() and np.isfinite(Y).all()):
            raise ValueError(f"{self.name}: training data holds NaN or inf")

        device = self.device
        ds = TensorDataset(th.from_numpy(X), th.from_numpy(Y))
        dl = DataLoader(ds, batch_size=int(opts.batch_size), shuffle=True, drop_last=False)

        opt = self._optimizer(opts)
        crit = nn.MSELoss()
        iterations = int(opts.iterations)

        err = float("inf")
        ep = 0
        self.train()
        for ep in range(1, iterations + 1):
            ep_loss = 0.0
            seen = 0
            for xb, yb in dl:
                xb = xb.to(device, non_blocking=True)
                yb = yb.to(device, non_blocking=True)
                opt.zero_grad(set_to_none=True)
                yhat, _ = self(xb)
                loss = crit(yhat, yb)
                loss.backward()
                opt.step()

                ep_loss += loss.item() * xb.size(0)
                seen += xb.size(0)

            err = ep_loss / max(1, seen)
            if not math.isfinite(err):
                self.eval()
                raise EngineTrainingError(f"{self.name}: training error diverged at epoch {ep} ({err})")

            done = err < float(opts.error_thresh)
            if opts.log and (ep % int(opts.log_period) == 0 or done or ep == iterations):
                _emit(opts.log, f"[{ep}/{iterations}] {self.name} error={err:.6f}")
            if done:
                break

        self.eval()
        return {"error": float(err), "iterations": ep}

    def to_json(self) -> dict:
        return {
            "type": type(self).__name__,
            "sizes": list(self.sizes),
            "activation": self.activation_name,
            "layers": [
                {
                    "weights": layer.weight.detach().cpu().tolist(),
                    "biases": layer.bias.detach().cpu().tolist(),
                }
                for layer in self.layers
            ],
        }

    def check_json(self, obj: dict) -> tuple[list, str]:
        """
        Validate a to_json() dump against this network without touching it.
        Returns: (per-layer (weights, biases) arrays, activation name)
        """
        kind = obj.get("type", type(self).__name__)
        if kind != type(self).__name__:
            raise ValueError(f"{self.name}: cannot load a '{kind}' network")

        sizes = [int(s) for s in obj.get("sizes", [])]
        if sizes != self.sizes:
            raise SizeMismatchError(f"{self.name}: saved sizes {sizes} do not match network sizes {self.sizes}")

        layers = obj.get("layers") or []
        if len(layers) != len(self.layers):
            raise SizeMismatchError(f"{self.name}: saved {len(layers)} layers, network has {len(self.layers)}")

        activation = obj.get("activation", self.activation_name)
        if activation not in _ACTIVATIONS:
            raise ValueError(f"{self.name}: unknown activation '{activation}'")

        weights = []
        for i, (saved, layer) in enumerate(zip(layers, self.layers)):
            w = np.asarray(saved["weights"], dtype=np.float32)
            b = np.asarray(saved["biases"], dtype=np.float32)
            if w.shape != tuple(layer.weight.shape) or b.shape != tuple(layer.bias.shape):
                raise SizeMismatchError(
                    f"{self.name}: layer {i} saved as {w.shape}/{b.shape}, "
                    f"expected {tuple(layer.weight.shape)}/{tuple(layer.bias.shape)}"
                )
            weights.append((w, b))

        return weights, activation

    def load_weights(self, weights: list, activation: str) -> FeedForward:
        # weights must come from check_json()
        with th.no_grad():
            for (w, b), layer in zip(weights, self.layers):
                layer.weight.copy_(th.as_tensor(w, device=self.device))
                layer.bias.copy_(th.as_tensor(b, device=self.device))

        if activation != self.activation_name:
            self.activation_name = activation
            self.act = _ACTIVATIONS[activation]()
        self.outputs = []
        return self

    def from_json(self, obj: dict) -> FeedForward:
        """Load weights saved by to_json() into this network. The topology must match."""
        return self.load_weights(*self.check_json(obj))
