#!/usr/bin/env python3
"""
Quick Start - Minimal example to get started with neuronet.

Run this script to watch a network learn XOR one training step at a time.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from neuronet.core.layer import Layer
from neuronet.core.network import Network
from neuronet.datasets.toy import get_dataset

print("neuronet - Quick Start")
print("="*40)

# Build a network from pre-built layers: 2 inputs, 4 hidden, 1 output
network = Network([
    Layer(2, 'identity', bias=True),
    Layer(4, 'hyperbolic', bias=True),
    Layer(1, 'logistic'),
], seed=0)
print(f"\nCreated: {network}")

X, y = get_dataset('xor')
print(f"Dataset: XOR ({len(y)} examples)")

# Train by hand: activate -> backprop -> accumulate -> update
print("\nTraining...")
for epoch in range(3000):
    for inputs, target in zip(X, y):
        network.activate(inputs)
        network.backprop(target)
        network.accumulate_gradients()
        network.update_weights(0.5)
    if epoch % 500 == 0:
        print(f"Epoch {epoch}: error={network.last_error:.4f}")

print()
for inputs, target in zip(X, y):
    output = network.activate(inputs)
    print(f"{inputs} -> {output[0]:.3f} (target {target[0]:.0f})")

print("\nTry a softmax output layer or the Trainer in neuronet.core.training!")
