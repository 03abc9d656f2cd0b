"""
Entry point for running neuronet as a module.

Usage:
    python -m neuronet                          # Train a 2-4-1 network on XOR
    python -m neuronet --dataset and --hidden   # No hidden layer
    python -m neuronet --list                   # Show catalogs and datasets
"""

import argparse
import logging
import sys

from .core.activations import list_activations
from .core.error_functions import ERROR_FUNCTIONS
from .core.exceptions import NetworkError
from .core.network import Network
from .core.training import Trainer, TrainingConfig
from .datasets import get_dataset, list_datasets


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='neuronet',
        description='Train a small feedforward network on a toy dataset'
    )
    parser.add_argument('--dataset', default='xor',
                        help='Dataset name (default: xor)')
    parser.add_argument('--hidden', type=int, nargs='*', default=[4],
                        help='Hidden layer sizes (default: 4)')
    parser.add_argument('--activation', default='hyperbolic',
                        help='Hidden layer activation (default: hyperbolic)')
    parser.add_argument('--output-activation', default='logistic',
                        help='Output layer activation (default: logistic)')
    parser.add_argument('--error', default='mean_squared',
                        help='Error function (default: mean_squared)')
    parser.add_argument('--no-bias', action='store_true',
                        help='Build the network without bias neurons')
    parser.add_argument('--epochs', type=int, default=2000,
                        help='Number of training epochs (default: 2000)')
    parser.add_argument('--learning-rate', type=float, default=0.5,
                        help='Learning rate (default: 0.5)')
    parser.add_argument('--batch-size', type=int, default=1,
                        help='Examples per weight update, 0 for full batch (default: 1)')
    parser.add_argument('--target-error', type=float, default=None,
                        help='Stop once the mean error drops below this value')
    parser.add_argument('--seed', type=int, default=0,
                        help='Random seed (default: 0)')
    parser.add_argument('--list', action='store_true',
                        help='List activations, error functions and datasets')
    parser.add_argument('--verbose', action='store_true',
                        help='Print training progress')
    return parser


def print_catalogs():
    print("Activations:")
    for name, info in list_activations().items():
        print(f"  {name:<14} {info['family']:<11} {info['description']}")
    print("\nError functions:")
    for name, fn in ERROR_FUNCTIONS.items():
        print(f"  {name:<22} {fn.description}")
    print("\nDatasets:")
    for name, info in list_datasets().items():
        print(f"  {name:<10} {info['description']}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.list:
        print_catalogs()
        return 0

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format='%(name)s: %(message)s')

    try:
        X, y = get_dataset(args.dataset)
        sizes = [X.shape[1]] + list(args.hidden) + [y.shape[1]]
        network = Network(
            sizes,
            error_function=args.error,
            activation=args.activation,
            output_activation=args.output_activation,
            bias=not args.no_bias,
            seed=args.seed,
        )
        config = TrainingConfig(
            epochs=args.epochs,
            learning_rate=args.learning_rate,
            batch_size=args.batch_size or None,
            target_error=args.target_error,
        )
        trainer = Trainer(network, config)
        history = trainer.train(X, y, verbose=args.verbose)
    except (NetworkError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"{network}")
    print(f"Final error: {history['error'][-1]:.6f} after {history['epoch'][-1] + 1} epochs")
    for inputs, target, output in zip(X, y, trainer.predict(X)):
        print(f"  {list(inputs)} -> {[round(float(v), 4) for v in output]} (target {list(target)})")
    return 0


if __name__ == '__main__':
    sys.exit(main())
