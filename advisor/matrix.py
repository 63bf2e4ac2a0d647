"""
matrix.py

Builds, stores and queries the Wordle feedback pattern matrix.

Matrix shape:
    (n_allowed_guesses, n_answers)

Each cell contains an integer 0..242, the base-3 feedback code of
guess=allowed[row] against answer=answers[col] (see patterns.py).

On disk the matrix is raw bytes with no header: one byte per cell,
row-major, so cell (r, c) lives at offset r * n_answers + c. The file only
makes sense together with the exact word lists (content and order) it was
built from; the loader can only catch a mismatch when the sizes differ.
"""

import time
from pathlib import Path

import numpy as np
from tqdm import tqdm

from advisor.errors import EmptyInput, IndexOutOfRange, InvalidInput, SizeMismatch
from advisor.patterns import PATTERN_COUNT, check_code, encode_words, score_matrix
from advisor.words import ALLOWED_PATH, ANSWERS_PATH, DATA_DIR


MATRIX_PATH = DATA_DIR / "pattern_matrix.bin"

DEFAULT_BATCH_SIZE = 1200
RANK_BATCH_SIZE = 256

NOT_FOUND = -1


class PatternMatrix:
    """
    Immutable guess x answer table of feedback codes plus reverse indexes.

    All queries are read-only and bounds-checked. Candidate sets are 1-D
    integer arrays of answer (column) indices; results keep their order.
    """

    def __init__(self, allowed, answers, data):
        self.allowed = tuple(allowed)
        self.answers = tuple(answers)
        self.rows = len(self.allowed)
        self.cols = len(self.answers)

        if isinstance(data, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(data, dtype=np.uint8).copy()
        else:
            flat = np.array(data, copy=True).reshape(-1)
            if flat.size and not np.issubdtype(flat.dtype, np.integer):
                raise InvalidInput(f"matrix cells must be integers, got {flat.dtype}")
        if flat.size != self.rows * self.cols:
            raise SizeMismatch(
                f"matrix buffer has {flat.size} cells, expected "
                f"{self.rows} x {self.cols} = {self.rows * self.cols}"
            )
        if flat.size and (int(flat.min()) < 0 or int(flat.max()) >= PATTERN_COUNT):
            raise InvalidInput("matrix contains cells outside 0..242 (corrupt file?)")

        self.data = flat.astype(np.uint8, copy=False).reshape(self.rows, self.cols)
        self.data.flags.writeable = False

        # a repeated word keeps its first index; its rows are identical
        self._allowed_index = _first_index(self.allowed)
        self._answer_index = _first_index(self.answers)

    @property
    def shape(self):
        return self.rows, self.cols

    def cell(self, guess_idx: int, answer_idx: int) -> int:
        """Feedback code of allowed[guess_idx] against answers[answer_idx]."""
        self._check_row(guess_idx)
        if not 0 <= answer_idx < self.cols:
            raise IndexOutOfRange(f"answer index out of range: {answer_idx}")
        return int(self.data[guess_idx, answer_idx])

    def guess_index_of(self, word: str) -> int:
        """Row of *word*, or NOT_FOUND if it is outside the guess list."""
        return self._allowed_index.get(word, NOT_FOUND)

    def answer_index_of(self, word: str) -> int:
        """Column of *word*, or NOT_FOUND if it is not a possible answer."""
        return self._answer_index.get(word, NOT_FOUND)

    def filter_by_pattern(self, guess_idx: int, pattern: int, candidates) -> np.ndarray:
        """Candidates (in input order) whose cell in row *guess_idx* equals *pattern*."""
        self._check_row(guess_idx)
        pattern = check_code(pattern)
        candidates = self.check_candidates(candidates)
        return candidates[self.data[guess_idx, candidates] == pattern]

    def distribution(self, guess_idx: int, candidates, weights) -> np.ndarray:
        """
        243-bucket histogram of *weights* keyed by the pattern each candidate
        gives for guess row *guess_idx*.
        """
        self._check_row(guess_idx)
        candidates = self.check_candidates(candidates)
        weights = _check_weights(weights, candidates)
        return np.bincount(
            self.data[guess_idx, candidates], weights=weights, minlength=PATTERN_COUNT
        )

    def distributions(self, candidates, weights, batch_size=RANK_BATCH_SIZE, show_progress=False):
        """
        Histograms for every guess row at once, shape (rows, 243).

        Rows are processed in chunks; each chunk is turned into a single
        bincount by offsetting row r's codes by r * 243.
        """
        candidates = self.check_candidates(candidates)
        weights = _check_weights(weights, candidates)
        out = np.zeros((self.rows, PATTERN_COUNT), dtype=np.float64)
        if candidates.size == 0:
            return out

        starts = range(0, self.rows, batch_size)
        if show_progress:
            starts = tqdm(starts, desc="Ranking guesses", unit="batch")

        for r0 in starts:
            r1 = min(self.rows, r0 + batch_size)
            block = self.data[r0:r1][:, candidates].astype(np.int64)
            block += (np.arange(r1 - r0, dtype=np.int64) * PATTERN_COUNT)[:, None]
            counts = np.bincount(
                block.ravel(),
                weights=np.tile(weights, r1 - r0),
                minlength=(r1 - r0) * PATTERN_COUNT,
            )
            out[r0:r1] = counts.reshape(r1 - r0, PATTERN_COUNT)
        return out

    def check_candidates(self, candidates) -> np.ndarray:
        """Coerce *candidates* to a 1-D index array, checking column bounds."""
        return as_indices(candidates, self.cols)

    def _check_row(self, guess_idx):
        if not 0 <= guess_idx < self.rows:
            raise IndexOutOfRange(f"guess index out of range: {guess_idx}")


def _first_index(words):
    index = {}
    for i, w in enumerate(words):
        index.setdefault(w, i)
    return index


def as_indices(candidates, bound: int) -> np.ndarray:
    """Validate a candidate set as a 1-D array of indices in [0, bound)."""
    arr = np.asarray(candidates)
    if arr.size == 0:
        return np.zeros(0, dtype=np.intp)
    if arr.ndim != 1 or not np.issubdtype(arr.dtype, np.integer):
        raise InvalidInput("candidate indices must be a flat sequence of integers")
    if int(arr.min()) < 0 or int(arr.max()) >= bound:
        raise IndexOutOfRange(f"candidate index outside 0..{bound - 1}")
    return arr.astype(np.intp, copy=False)


def _check_weights(weights, candidates):
    weights = np.asarray(weights, dtype=np.float64)
    if weights.ndim != 1 or weights.size != candidates.size:
        raise SizeMismatch(
            f"weights length {weights.size} != candidates length {candidates.size}"
        )
    return weights


def build_matrix(allowed: list[str], answers: list[str]) -> PatternMatrix:
    """Compute the full pattern matrix in memory. Fine for small word lists."""
    if not allowed or not answers:
        raise EmptyInput("cannot build a pattern matrix from an empty word list")
    data = score_matrix(encode_words(allowed), encode_words(answers))
    return PatternMatrix(allowed, answers, data)


def build_matrix_file(
    allowed: list[str],
    answers: list[str],
    path=MATRIX_PATH,
    batch_size: int = DEFAULT_BATCH_SIZE,
    verbose: bool = True,
) -> Path:
    """
    Compute the pattern matrix and write it to *path* batch by batch.

    This is the most expensive step in the project, but it only needs to be
    done once per word list. Each batch of rows is scored and flushed before
    the next one starts, so memory stays proportional to
    batch_size * n_answers however large the guess list is.
    """
    if not allowed or not answers:
        raise EmptyInput("cannot build a pattern matrix from an empty word list")
    if batch_size <= 0:
        raise InvalidInput(f"batch size must be positive, got {batch_size}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    n_allowed = len(allowed)
    n_answers = len(answers)
    allowed_codes = encode_words(allowed)
    answer_codes = encode_words(answers)

    if verbose:
        print(f"Building pattern matrix... rows={n_allowed} cols={n_answers}")
    start = time.time()

    batches = range(0, n_allowed, batch_size)
    with open(path, "wb") as f:
        for r0 in tqdm(batches, desc="Row batches", unit="batch", disable=not verbose):
            r1 = min(n_allowed, r0 + batch_size)
            f.write(score_matrix(allowed_codes[r0:r1], answer_codes).tobytes())

    if verbose:
        elapsed = time.time() - start
        size = path.stat().st_size
        print(f"Matrix saved to {path} ({n_allowed} x {n_answers}, {size:,} bytes) in {elapsed:.2f}s.")

    return path


def load_matrix(path, allowed: list[str], answers: list[str]) -> PatternMatrix:
    """Load a matrix file built from exactly these word lists."""
    data = np.fromfile(path, dtype=np.uint8)
    return PatternMatrix(allowed, answers, data)


def load_or_build_matrix(
    allowed: list[str],
    answers: list[str],
    path=MATRIX_PATH,
    allowed_path=ALLOWED_PATH,
    answers_path=ANSWERS_PATH,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> PatternMatrix:
    """
    Load a previously built pattern matrix if it matches current word lists.

    If the matrix file is missing, its size does not match the lists, or
    either word list file is newer than it, it is rebuilt first.
    """
    path = Path(path)
    expected_size = len(allowed) * len(answers)

    if path.exists():
        size_ok = path.stat().st_size == expected_size

        matrix_mtime = path.stat().st_mtime
        cache_is_new_enough = all(
            matrix_mtime >= Path(p).stat().st_mtime
            for p in (allowed_path, answers_path)
            if p is not None and Path(p).exists()
        )

        if size_ok and cache_is_new_enough:
            print("Loaded compatible pattern matrix from disk.")
            return load_matrix(path, allowed, answers)

        if not size_ok:
            print("Matrix size mismatch. Rebuilding.")
        else:
            print("Matrix is older than word lists. Rebuilding.")

    build_matrix_file(allowed, answers, path, batch_size=batch_size)
    return load_matrix(path, allowed, answers)
