"""
errors.py

Exception types raised by the advisor core.

Each error also derives from the closest builtin so callers that only know
about ValueError / IndexError keep working.
"""


class AdvisorError(Exception):
    """Base class for every error raised by the advisor package."""


class InvalidInput(AdvisorError, ValueError):
    """Malformed word, pattern digit/code outside its domain, bad weight."""


class IndexOutOfRange(AdvisorError, IndexError):
    """Guess, answer or candidate index outside the matrix bounds."""


class SizeMismatch(AdvisorError, ValueError):
    """Buffer or array length does not match the shape it must have."""


class EmptyInput(AdvisorError, ValueError):
    """A word list that must contain at least one word is empty."""


class UnsupportedWithoutMatrix(AdvisorError, RuntimeError):
    """A policy that needs the pattern matrix was asked for without one."""


class Contradiction(AdvisorError):
    """
    No possible answer is consistent with the observed feedback.

    This is an outcome, not a fault: reduce() returns an empty candidate set
    and only select() raises it, since there is nothing left to rank.
    """
