"""
selector.py

Ranks allowed guesses against the current candidate answers.

Three policies:

1. frequency
   Score each guess by how common its distinct letters are among the
   candidates. Needs no pattern matrix.

2. entropy
   Maximise the Shannon entropy (bits) of the guess's weighted feedback
   distribution over the candidates.

3. expected
   Minimise the estimated total number of guesses: the chance the guess is
   the answer outright, otherwise one guess plus the expected extra guesses
   predicted from the information it leaves unresolved.

Every policy breaks ties in favour of the earliest guess in the allowed
list (argmax/argmin return the first extreme).
"""

from collections import Counter

import numpy as np

from advisor.entropy import entropies_from_counts, entropy_from_counts, expected_extra_guesses
from advisor.errors import (
    Contradiction,
    EmptyInput,
    InvalidInput,
    SizeMismatch,
    UnsupportedWithoutMatrix,
)
from advisor.matrix import RANK_BATCH_SIZE, as_indices


FREQUENCY = "frequency"
ENTROPY = "entropy"
EXPECTED = "expected"

POLICIES = (FREQUENCY, ENTROPY, EXPECTED)
MATRIX_POLICIES = (ENTROPY, EXPECTED)

_ALIASES = {"fast": FREQUENCY}


def resolve_policy(name: str) -> str:
    policy = _ALIASES.get(name, name)
    if policy not in POLICIES:
        raise InvalidInput(f"unknown method {name!r}; choose from {', '.join(POLICIES)}")
    return policy


def weights_from_priors(answers, candidates, priors) -> np.ndarray:
    """
    Normalised prior weight of each candidate, aligned with *candidates*.

    Words missing from *priors* weigh 0. If the candidates weigh nothing in
    total the distribution falls back to uniform.
    """
    candidates = as_indices(candidates, len(answers))
    priors = priors or {}
    weights = np.array([priors.get(answers[i], 0.0) for i in candidates], dtype=np.float64)
    if np.any(weights < 0) or not np.all(np.isfinite(weights)):
        raise InvalidInput("prior weights must be finite and non-negative")
    total = weights.sum()
    if total == 0:
        if candidates.size == 0:
            return weights
        return np.full(candidates.size, 1.0 / candidates.size)
    return weights / total


def letter_frequency_scores(allowed, answers, candidates) -> np.ndarray:
    """Sum, over each guess's distinct letters, of letter counts in the candidates."""
    candidates = as_indices(candidates, len(answers))
    freq = Counter()
    for i in candidates:
        freq.update(answers[i])
    return np.array([sum(freq[ch] for ch in set(word)) for word in allowed], dtype=np.float64)


def entropy_scores(matrix, candidates, weights, show_progress=False) -> np.ndarray:
    """Feedback entropy (bits) of every allowed guess."""
    dists = matrix.distributions(
        candidates, weights, batch_size=RANK_BATCH_SIZE, show_progress=show_progress
    )
    return entropies_from_counts(dists)


def expected_scores(matrix, candidates, weights, show_progress=False) -> np.ndarray:
    """
    Expected total guesses to finish when playing each allowed guess next.

        H0          = entropy of the candidate weights
        gain(g)     = max(0, H0 - H(g))
        p(g)        = weight of g if g is a candidate, else 0
        score(g)    = p(g) + (1 - p(g)) * (1 + expected_extra_guesses(gain(g)))
    """
    candidates = matrix.check_candidates(candidates)
    weights = np.asarray(weights, dtype=np.float64)
    h0 = entropy_from_counts(weights)
    h1 = entropy_scores(matrix, candidates, weights, show_progress=show_progress)
    gain = np.maximum(0.0, h0 - h1)

    prob = np.zeros(matrix.rows, dtype=np.float64)
    for col, weight in zip(candidates, weights):
        row = matrix.guess_index_of(matrix.answers[col])
        if row >= 0:
            prob[row] += weight

    return prob + (1 - prob) * (1 + expected_extra_guesses(gain))


def policy_scores(policy, allowed, answers, candidates, priors=None, matrix=None, show_progress=False):
    """
    Score every allowed guess under *policy*.

    Returns (scores, higher_is_better).
    """
    policy = resolve_policy(policy)
    if not allowed:
        raise EmptyInput("no allowed guesses to choose from")
    candidates = as_indices(candidates, len(answers))
    if candidates.size == 0:
        raise Contradiction("no possible answers left to rank guesses against")

    if policy == FREQUENCY:
        return letter_frequency_scores(allowed, answers, candidates), True

    if matrix is None:
        raise UnsupportedWithoutMatrix(
            f"method {policy!r} requires the precomputed pattern matrix; build it first"
        )
    # scores come back in matrix row order, so the lists must be the matrix's own
    if tuple(allowed) != matrix.allowed or tuple(answers) != matrix.answers:
        raise SizeMismatch("pattern matrix was built from different word lists")
    weights = weights_from_priors(answers, candidates, priors)
    if policy == ENTROPY:
        return entropy_scores(matrix, candidates, weights, show_progress), True
    return expected_scores(matrix, candidates, weights, show_progress), False


def select(policy, allowed, answers, candidates, priors=None, matrix=None) -> str:
    """Best allowed guess under *policy*; the first one wins ties."""
    scores, higher_is_better = policy_scores(policy, allowed, answers, candidates, priors, matrix)
    best = int(np.argmax(scores)) if higher_is_better else int(np.argmin(scores))
    return allowed[best]


def rank(policy, allowed, answers, candidates, priors=None, matrix=None, top=20, show_progress=False):
    """The *top* best guesses as (word, score) pairs, best first."""
    if top < 1:
        raise InvalidInput(f"top must be at least 1, got {top}")
    scores, higher_is_better = policy_scores(
        policy, allowed, answers, candidates, priors, matrix, show_progress
    )
    keys = -scores if higher_is_better else scores
    order = np.argsort(keys, kind="stable")[:top]
    return [(allowed[i], float(scores[i])) for i in order]
