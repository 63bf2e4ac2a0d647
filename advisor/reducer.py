"""
reducer.py

Narrows the set of possible answers using observed (guess, pattern) feedback.
"""

from typing import NamedTuple

import numpy as np

from advisor.matrix import NOT_FOUND, as_indices
from advisor.patterns import check_code, encode_word, score_matrix


class Constraint(NamedTuple):
    guess: str
    pattern: int


def filter_by_scoring(guess: str, pattern: int, candidates, answer_codes) -> np.ndarray:
    """
    Candidates whose answer would give *pattern* for *guess*, scored on the fly.

    Used for guesses with no matrix row; gives the same result as
    PatternMatrix.filter_by_pattern would.
    """
    guess_code = np.array([encode_word(guess)], dtype=np.uint8)
    pattern = check_code(pattern)
    candidates = as_indices(candidates, len(answer_codes))
    if candidates.size == 0:
        return candidates
    codes = score_matrix(guess_code, answer_codes[candidates])[0]
    return candidates[codes == pattern]


def reduce_candidates(constraints, answer_codes, matrix=None, candidates=None) -> np.ndarray:
    """
    Apply *constraints* in order and return the surviving answer indices.

    Starts from every answer (or from *candidates*). Guesses with a row in
    *matrix* are filtered through it; anything else, and everything when
    there is no matrix, is scored directly. The result keeps answer order
    and may be empty, which means the feedback is contradictory.
    """
    if candidates is None:
        current = np.arange(len(answer_codes), dtype=np.intp)
    else:
        current = as_indices(candidates, len(answer_codes))

    for guess, pattern in constraints:
        guess = guess.strip().lower()
        row = matrix.guess_index_of(guess) if matrix is not None else NOT_FOUND
        if row != NOT_FOUND:
            current = matrix.filter_by_pattern(row, pattern, current)
        else:
            current = filter_by_scoring(guess, pattern, current, answer_codes)
    return current
