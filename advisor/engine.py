"""
engine.py

The advisor engine: word lists, their letter codes and (optionally) the
pattern matrix, loaded once and then only read.

Every query takes its request state (constraints, candidate indices,
priors) as arguments and returns fresh values, so one engine can serve any
number of callers at the same time.
"""

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from advisor import selector
from advisor.errors import EmptyInput, SizeMismatch, UnsupportedWithoutMatrix
from advisor.matrix import MATRIX_PATH, PatternMatrix, as_indices, load_matrix
from advisor.patterns import encode_words, parse_pattern
from advisor.reducer import Constraint, reduce_candidates
from advisor.words import ALLOWED_PATH, ANSWERS_PATH, load_words, uniform_priors


SAMPLE_SIZE = 20


@dataclass(frozen=True)
class Status:
    candidate_count: int
    sample_words: list[str]
    has_precomputed_matrix: bool

    def to_dict(self):
        return {
            "possibleCount": self.candidate_count,
            "sample": list(self.sample_words),
            "hasMatrix": self.has_precomputed_matrix,
        }


@dataclass(frozen=True)
class Suggestion:
    """Outcome of one suggest() call."""

    next_guess: str | None
    candidate_count: int
    sample: list[str] = field(default_factory=list)
    method: str | None = None

    @property
    def contradiction(self) -> bool:
        return self.candidate_count == 0

    def to_dict(self):
        if self.contradiction:
            return {
                "error": "no possibilities left (check patterns/guesses)",
                "possibleCount": 0,
                "sample": [],
            }
        return {
            "nextGuess": self.next_guess,
            "possibleCount": self.candidate_count,
            "sample": list(self.sample),
        }


@dataclass(frozen=True, eq=False)
class Engine:
    allowed: tuple
    answers: tuple
    answer_codes: np.ndarray = field(repr=False)
    matrix: PatternMatrix | None = field(default=None, repr=False)

    @classmethod
    def from_words(cls, allowed, answers, matrix=None):
        allowed = tuple(allowed)
        answers = tuple(answers)
        if not allowed:
            raise EmptyInput("allowed guess list is empty")
        if not answers:
            raise EmptyInput("possible answer list is empty")
        if matrix is not None and (matrix.allowed != allowed or matrix.answers != answers):
            raise SizeMismatch("pattern matrix was built from different word lists")
        return cls(allowed, answers, encode_words(answers), matrix)

    @classmethod
    def from_files(
        cls,
        allowed_path=ALLOWED_PATH,
        answers_path=ANSWERS_PATH,
        matrix_path=MATRIX_PATH,
        strict=True,
    ):
        """
        Load word lists and, if its file exists, the pattern matrix.

        A missing matrix file leaves only the frequency method available. A
        matrix file whose size does not match the lists raises SizeMismatch,
        or with strict=False is reported and ignored.
        """
        answers, allowed = load_words(allowed_path, answers_path)
        print(f"Loaded {len(allowed)} allowed words, {len(answers)} answer words.")

        matrix = None
        if matrix_path is not None and Path(matrix_path).exists():
            try:
                matrix = load_matrix(matrix_path, allowed, answers)
            except ValueError as exc:
                if strict:
                    raise
                print(f"Failed to load pattern matrix: {exc}")
            else:
                print("Loaded pattern matrix from disk.")
        else:
            print("No pattern matrix found - only the frequency method is available.")

        return cls.from_words(allowed, answers, matrix)

    @property
    def has_matrix(self) -> bool:
        return self.matrix is not None

    def methods(self):
        if self.has_matrix:
            return selector.POLICIES
        return tuple(p for p in selector.POLICIES if p not in selector.MATRIX_POLICIES)

    def reduce(self, constraints) -> np.ndarray:
        """Answer indices consistent with every (guess, pattern) constraint."""
        parsed = [Constraint(guess, parse_pattern(pattern)) for guess, pattern in constraints]
        return reduce_candidates(parsed, self.answer_codes, self.matrix)

    def select(self, policy, candidates, priors=None) -> str:
        self._check_policy(policy)
        return selector.select(
            policy, self.allowed, self.answers, candidates, priors, self.matrix
        )

    def rank(self, policy, candidates, priors=None, top=20, show_progress=False):
        self._check_policy(policy)
        return selector.rank(
            policy, self.allowed, self.answers, candidates, priors, self.matrix,
            top=top, show_progress=show_progress,
        )

    def status(self, candidates, sample_size=SAMPLE_SIZE) -> Status:
        candidates = as_indices(candidates, len(self.answers))
        return Status(
            candidate_count=int(candidates.size),
            sample_words=self.sample(candidates, sample_size),
            has_precomputed_matrix=self.has_matrix,
        )

    def sample(self, candidates, size=SAMPLE_SIZE):
        return [self.answers[i] for i in candidates[:size]]

    def suggest(self, constraints, policy=selector.FREQUENCY, priors=None) -> Suggestion:
        """
        Reduce, then pick the next guess.

        No candidates left is reported as a contradiction and a single
        candidate is returned as-is; ranking only runs for two or more.
        """
        policy = selector.resolve_policy(policy)
        self._check_policy(policy)
        candidates = self.reduce(constraints)

        if candidates.size == 0:
            return Suggestion(None, 0, [], policy)
        if candidates.size == 1:
            word = self.answers[int(candidates[0])]
            return Suggestion(word, 1, [word], policy)

        if priors is None:
            priors = uniform_priors(self.answers)
        guess = self.select(policy, candidates, priors)
        return Suggestion(guess, int(candidates.size), self.sample(candidates), policy)

    def words(self):
        return {
            "allowed": list(self.allowed),
            "answers": list(self.answers),
            "hasMatrix": self.has_matrix,
        }

    def _check_policy(self, policy):
        policy = selector.resolve_policy(policy)
        if policy in selector.MATRIX_POLICIES and not self.has_matrix:
            raise UnsupportedWithoutMatrix(
                f"method {policy!r} requires the precomputed pattern matrix; build it first"
            )
