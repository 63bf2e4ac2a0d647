"""
patterns.py

Wordle feedback patterns and their integer encoding.

Each of the 5 tiles gets one digit:

    0 = gray   (MISS)
    1 = yellow (MISPLACED)
    2 = green  (EXACT)

and the 5-digit pattern is packed little-endian in base 3, so digit i is
worth 3**i:

    code = d0*1 + d1*3 + d2*9 + d3*27 + d4*81        (0 <= code < 243)

Words are scored as WordCodes (one 0..25 letter code per position). A
scalar scorer handles one pair; score_matrix() applies the identical rule
to whole arrays of guesses and answers at once and is what the matrix
build and the off-vocabulary filtering use.
"""

import numpy as np

from advisor.errors import InvalidInput
from advisor.words import WORD_LEN, is_word


MISS = 0
MISPLACED = 1
EXACT = 2

PATTERN_COUNT = 3**WORD_LEN
ALL_EXACT = PATTERN_COUNT - 1

POW3 = tuple(3**i for i in range(WORD_LEN))
_POW3_ARRAY = np.array(POW3, dtype=np.uint8)

_COLOURS = {
    "g": EXACT,
    "y": MISPLACED,
    "b": MISS,
    "x": MISS,
    ".": MISS,
    "-": MISS,
}


def encode_word(word: str) -> tuple[int, ...]:
    """Map a word to its WordCode, raising InvalidInput on malformed words."""
    if not is_word(word):
        raise InvalidInput(f"not a 5-letter lowercase word: {word!r}")
    return tuple(ord(ch) - 97 for ch in word)


def encode_words(words) -> np.ndarray:
    """Encode a word list as a read-only (n, 5) uint8 array of letter codes."""
    words = list(words)
    for word in words:
        if not is_word(word):
            raise InvalidInput(f"not a 5-letter lowercase word: {word!r}")
    if not words:
        codes = np.zeros((0, WORD_LEN), dtype=np.uint8)
    else:
        raw = "".join(words).encode("ascii")
        codes = (np.frombuffer(raw, dtype=np.uint8) - 97).reshape(len(words), WORD_LEN)
    codes.flags.writeable = False
    return codes


def pattern_to_int(digits) -> int:
    """Pack a 5-digit pattern into its base-3 code."""
    digits = tuple(digits)
    if len(digits) != WORD_LEN:
        raise InvalidInput(f"pattern must have {WORD_LEN} digits, got {len(digits)}")
    code = 0
    for d, p in zip(digits, POW3):
        if not isinstance(d, (int, np.integer)) or isinstance(d, bool) or not 0 <= d <= 2:
            raise InvalidInput(f"pattern digits must be integers 0..2, got {d!r}")
        code += int(d) * p
    return code


def int_to_pattern(code) -> tuple[int, ...]:
    """Unpack a base-3 code into its 5-digit pattern."""
    code = check_code(code)
    digits = []
    for _ in range(WORD_LEN):
        digits.append(code % 3)
        code //= 3
    return tuple(digits)


def check_code(code) -> int:
    """Return *code* as an int if it is a valid pattern code."""
    if not isinstance(code, (int, np.integer)) or isinstance(code, bool):
        raise InvalidInput(f"pattern code must be an integer, got {code!r}")
    if not 0 <= code < PATTERN_COUNT:
        raise InvalidInput(f"pattern code out of range 0..{PATTERN_COUNT - 1}: {code}")
    return int(code)


def score(guess_code, answer_code) -> tuple[int, ...]:
    """
    Wordle feedback digits for one (guess, answer) pair of WordCodes.

    1. Exact pass: every position where the letters agree is EXACT and
       consumes that answer position.

    2. Misplaced pass: remaining guess positions, left to right, take the
       leftmost answer position that is not yet consumed and holds the same
       letter. Found means MISPLACED (and that position is consumed),
       otherwise MISS.

    The scan order matters when a letter occurs more often in the guess
    than in the answer: the earliest guess occurrence gets the yellow.
    """
    if len(guess_code) != WORD_LEN or len(answer_code) != WORD_LEN:
        raise InvalidInput(f"word codes must have length {WORD_LEN}")

    result = [MISS] * WORD_LEN
    used = [False] * WORD_LEN

    for i in range(WORD_LEN):
        if guess_code[i] == answer_code[i]:
            result[i] = EXACT
            used[i] = True

    for i in range(WORD_LEN):
        if result[i] == EXACT:
            continue
        for j in range(WORD_LEN):
            if not used[j] and answer_code[j] == guess_code[i]:
                result[i] = MISPLACED
                used[j] = True
                break

    return tuple(result)


def pattern_code(guess: str, answer: str) -> int:
    """Feedback code for a (guess, answer) pair of words."""
    return pattern_to_int(score(encode_word(guess), encode_word(answer)))


def score_matrix(guess_codes: np.ndarray, answer_codes: np.ndarray) -> np.ndarray:
    """
    Vectorised score(): feedback codes for every guess against every answer.

    guess_codes is (G, 5), answer_codes is (A, 5); the result is a (G, A)
    uint8 array of pattern codes. Memory use is a few bytes per cell times
    the word length, so callers bound G to keep batches small.
    """
    guess_codes = np.asarray(guess_codes, dtype=np.uint8).reshape(-1, WORD_LEN)
    answer_codes = np.asarray(answer_codes, dtype=np.uint8).reshape(-1, WORD_LEN)

    # (G, A, 5) views: guess letter i / answer letter j for every pair
    g = guess_codes[:, None, :]
    a = answer_codes[None, :, :]

    exact = g == a
    used = exact.copy()
    digits = exact.astype(np.uint8) * EXACT

    for i in range(WORD_LEN):
        open_i = ~exact[:, :, i]
        found = np.zeros(open_i.shape, dtype=bool)
        for j in range(WORD_LEN):
            hit = open_i & ~found & ~used[:, :, j] & (g[:, :, i] == a[:, :, j])
            used[:, :, j] |= hit
            found |= hit
        digits[:, :, i][found] = MISPLACED

    return (digits * _POW3_ARRAY).sum(axis=2, dtype=np.uint8)


def parse_pattern(value) -> int:
    """
    Accept a pattern in any user-facing form and return its code.

    Forms: an int code (or a shorter digit string holding one, like "242"),
    a sequence of 5 digits, a 5-char digit string such as "20110" (position
    0 first), or a 5-char colour string using g (green), y (yellow) and
    b/x/./- (gray).
    """
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return check_code(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text.isdigit() and len(text) < WORD_LEN:
            return check_code(int(text))
        if len(text) != WORD_LEN:
            raise InvalidInput(f"pattern must have {WORD_LEN} characters: {value!r}")
        if text.isdigit():
            return pattern_to_int(int(ch) for ch in text)
        try:
            return pattern_to_int(_COLOURS[ch] for ch in text)
        except KeyError as exc:
            raise InvalidInput(f"unknown pattern character {exc.args[0]!r} in {value!r}") from exc
    try:
        digits = tuple(value)
    except TypeError as exc:
        raise InvalidInput(f"not a pattern: {value!r}") from exc
    return pattern_to_int(digits)


def format_pattern(code) -> str:
    """Render a pattern code as its digit string, position 0 first."""
    return "".join(str(d) for d in int_to_pattern(code))
