"""Toy datasets for training and checking networks."""

from .toy import (
    xor_truth_table,
    and_truth_table,
    or_truth_table,
    xor_dataset,
    sine_wave,
    DATASETS,
    get_dataset,
    list_datasets,
)

__all__ = [
    'xor_truth_table',
    'and_truth_table',
    'or_truth_table',
    'xor_dataset',
    'sine_wave',
    'DATASETS',
    'get_dataset',
    'list_datasets',
]
