"""
entropy.py

Entropy calculations over feedback-pattern histograms, plus the empirical
model that turns bits of information into expected extra guesses.
"""

import numpy as np


# Calibration constants of the expected-extra-guesses model. Empirical.
EXTRA_GUESS_SLOPE = 1.5
EXTRA_GUESS_SCALE = 11.5


def entropy_from_counts(counts):
    """Compute Shannon entropy (bits) from bucket counts or weights."""
    counts = np.asarray(counts, dtype=np.float64)
    total = counts.sum()
    if total <= 0:
        return 0.0
    probs = counts[counts > 0] / total
    return float(-np.sum(probs * np.log2(probs)))


def entropies_from_counts(counts):
    """
    Row-wise entropy of a 2-D array of histograms.

    Empty buckets contribute 0 rather than NaN; an all-zero row has entropy 0.
    """
    counts = np.asarray(counts, dtype=np.float64)
    totals = counts.sum(axis=1, keepdims=True)
    probs = np.divide(counts, totals, out=np.zeros_like(counts), where=totals > 0)
    logs = np.log2(probs, out=np.zeros_like(probs), where=probs > 0)
    return -np.sum(probs * logs, axis=1)


def expected_extra_guesses(bits):
    """
    Expected number of additional guesses given *bits* of information.

        2**-bits + 2 * (1 - 2**-bits) + 1.5 * bits / 11.5

    Works element-wise on arrays.
    """
    bits = np.asarray(bits, dtype=np.float64)
    certain = np.exp2(-bits)
    result = certain + 2 * (1 - certain) + (EXTRA_GUESS_SLOPE * bits) / EXTRA_GUESS_SCALE
    return float(result) if result.ndim == 0 else result
