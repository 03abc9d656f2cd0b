"""
Training utilities for networks.

Drives epochs of activate -> backprop -> accumulate_gradients ->
update_weights over a dataset, in online, mini-batch or full-batch mode.
"""

import logging
import numbers
import numpy as np
from typing import Callable, Dict, List, Optional
from dataclasses import dataclass

from .network import Network

logger = logging.getLogger(__name__)


@dataclass
class TrainingConfig:
    """Configuration for training."""
    epochs: int = 1000
    learning_rate: float = 0.5
    batch_size: Optional[int] = 1  # 1 = online, None = full batch
    shuffle: bool = True
    lr_schedule: Optional[str] = None  # 'cosine', 'step', None
    target_error: Optional[float] = None  # Stop once the mean error drops below
    record_every: int = 10

    def __post_init__(self):
        if not _is_count(self.epochs):
            raise ValueError(f"epochs must be a positive integer, got {self.epochs!r}")
        if not _is_count(self.record_every):
            raise ValueError(f"record_every must be a positive integer, got {self.record_every!r}")
        if self.batch_size is not None and not _is_count(self.batch_size):
            raise ValueError(
                f"batch_size must be a positive integer or None (full batch), got {self.batch_size!r}"
            )


def _is_count(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value > 0


class Trainer:
    """
    Trainer for networks.

    Supports:
    - Online, mini-batch and full-batch gradient descent
    - Learning rate schedules
    - Early stopping on a target error
    - Training history
    """

    def __init__(self, network: Network, config: Optional[TrainingConfig] = None):
        self.network = network
        self.config = config or TrainingConfig()
        self.history: Dict[str, List] = {}

    def train(
        self,
        X: np.ndarray,
        y: np.ndarray,
        callbacks: Optional[List[Callable]] = None,
        verbose: bool = False
    ) -> Dict[str, List]:
        """
        Train the network.

        Args:
            X: Training inputs, one row per example
            y: Training targets, one row (or scalar) per example
            callbacks: Functions called as callback(epoch, history) when recorded
            verbose: Print training progress

        Returns:
            Training history
        """
        if len(X) == 0:
            raise ValueError("Cannot train on an empty dataset")
        X = np.asarray(X, dtype=float).reshape(len(X), -1)
        y = np.asarray(y, dtype=float).reshape(len(y), -1)
        if len(X) != len(y):
            raise ValueError(f"X has {len(X)} examples but y has {len(y)}")
        n_samples = X.shape[0]

        batch_size = self.config.batch_size or n_samples
        callbacks = callbacks or []

        self.history = {
            'epoch': [],
            'error': [],
            'learning_rate': [],
        }

        for epoch in range(self.config.epochs):
            lr = self._get_learning_rate(epoch)

            if self.config.shuffle:
                indices = np.random.permutation(n_samples)
            else:
                indices = np.arange(n_samples)

            for start in range(0, n_samples, batch_size):
                for i in indices[start:start + batch_size]:
                    self.network.activate(X[i])
                    self.network.backprop(y[i])
                    self.network.accumulate_gradients()
                self.network.update_weights(lr)

            last_epoch = epoch == self.config.epochs - 1
            if epoch % self.config.record_every == 0 or last_epoch:
                error = self.evaluate(X, y)
                self.history['epoch'].append(epoch)
                self.history['error'].append(error)
                self.history['learning_rate'].append(float(lr))
                logger.debug("epoch %d: error=%.6f lr=%.4f", epoch, error, lr)

                if verbose and epoch % (self.config.record_every * 10) == 0:
                    print(f"Epoch {epoch}: error={error:.6f}")

                for callback in callbacks:
                    callback(epoch, self.history)

                if self.config.target_error is not None and error < self.config.target_error:
                    logger.info("Reached target error %.6f at epoch %d", error, epoch)
                    if verbose:
                        print(f"Reached target error at epoch {epoch}")
                    break

        return self.history

    def evaluate(self, X: np.ndarray, y: np.ndarray) -> float:
        """Mean error over a dataset. Does not touch gradients."""
        X = np.asarray(X, dtype=float).reshape(len(X), -1)
        y = np.asarray(y, dtype=float).reshape(len(y), -1)
        errors = []
        for inputs, target in zip(X, y):
            self.network.activate(inputs)
            errors.append(self.network.compute_error(target))
        return float(np.mean(errors))

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Network outputs for every row of X."""
        X = np.asarray(X, dtype=float).reshape(len(X), -1)
        return np.array([self.network.activate(inputs) for inputs in X])

    def _get_learning_rate(self, epoch: int) -> float:
        """Get learning rate for current epoch based on schedule."""
        base_lr = self.config.learning_rate

        if self.config.lr_schedule is None:
            return base_lr

        if self.config.lr_schedule == 'cosine':
            # Cosine annealing
            return base_lr * 0.5 * (1 + np.cos(np.pi * epoch / self.config.epochs))

        if self.config.lr_schedule == 'step':
            # Step decay at 50% and 75% of training
            if epoch >= 0.75 * self.config.epochs:
                return base_lr * 0.01
            if epoch >= 0.5 * self.config.epochs:
                return base_lr * 0.1
            return base_lr

        raise ValueError(f"Unknown lr_schedule '{self.config.lr_schedule}'")


def train_network(
    network: Network,
    X: np.ndarray,
    y: np.ndarray,
    verbose: bool = False,
    **kwargs
) -> Dict[str, List]:
    """Convenience function to train a network."""
    config = TrainingConfig(**kwargs)
    trainer = Trainer(network, config)
    return trainer.train(X, y, verbose=verbose)
