"""
words.py

Handles loading and organizing the Wordle word lists and answer priors.
No numpy here, just clean text handling.
"""

import csv
import re
from pathlib import Path

from advisor.errors import InvalidInput


DATA_DIR = Path(__file__).resolve().parent.parent / "data"
ALLOWED_PATH = DATA_DIR / "allowed.txt"
ANSWERS_PATH = DATA_DIR / "answers.txt"

WORD_LEN = 5
WORD_RE = re.compile(r"[a-z]{5}")


def is_word(value) -> bool:
    return isinstance(value, str) and WORD_RE.fullmatch(value) is not None


def clean_words(lines) -> list[str]:
    """
    Normalize raw lines into a word list.

    Each line is trimmed and lowercased; anything that is not exactly five
    ASCII letters is dropped. Order and repeats are kept, so the list lines
    up row for row with a matrix file built from the same text.
    """
    words = []
    for line in lines:
        word = line.strip().lower()
        if is_word(word):
            words.append(word)
    return words


def load_word_list(path) -> list[str]:
    """Load a newline-separated word list into a Python list."""
    with open(path, "r", encoding="utf-8") as f:
        return clean_words(f)


def load_words(allowed_path=ALLOWED_PATH, answers_path=ANSWERS_PATH):
    """
    Returns:
        answers: list of possible solution words
        allowed: list of valid guess words (usually includes answers)
    """
    answers = load_word_list(answers_path)
    allowed = load_word_list(allowed_path)
    return answers, allowed


def load_priors(path) -> dict[str, float]:
    """
    Load answer priors from a CSV file of ``word,weight`` rows.

    A header row is optional. Rows whose word is not a valid word are
    skipped, matching the word list loader. Weights must parse as
    non-negative numbers.
    """
    priors = {}
    with open(path, "r", encoding="utf-8", newline="") as f:
        for lineno, row in enumerate(csv.reader(f), start=1):
            if len(row) < 2:
                continue
            word = row[0].strip().lower()
            if not is_word(word):
                continue
            try:
                weight = float(row[1])
            except ValueError as exc:
                if lineno == 1:
                    continue
                raise InvalidInput(f"{path}:{lineno}: bad weight {row[1]!r}") from exc
            if weight < 0:
                raise InvalidInput(f"{path}:{lineno}: negative weight for {word!r}")
            priors[word] = weight
    return priors


def uniform_priors(answers) -> dict[str, float]:
    """Weight 1 for every answer, the default when no priors are given."""
    return {word: 1.0 for word in answers}
