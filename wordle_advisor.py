"""
wordle_advisor.py

Command-line front end for the Wordle next-guess advisor.

Modes:
-build: compute the pattern matrix file from the word lists, unless an
  up-to-date one of the right size is already there.
(default): suggest the next guess from the feedback given so far.

Feedback is passed as repeated -guess WORD PATTERN pairs. PATTERN is a
5-digit string (0 gray, 1 yellow, 2 green; first letter first), a colour
string such as "gybbg", or the integer pattern code.

Optional:
-method frequency|entropy|expected: ranking policy (default: entropy when
  the matrix is available, otherwise frequency).
-top N: list the N best guesses with their scores instead of one word.
-status: only show how many answers remain and a sample of them.
-priors FILE: CSV of word,weight answer priors (default: uniform).
"""

import argparse
from pathlib import Path

from advisor.engine import SAMPLE_SIZE, Engine
from advisor.errors import AdvisorError
from advisor.matrix import DEFAULT_BATCH_SIZE, load_or_build_matrix
from advisor.patterns import format_pattern, parse_pattern
from advisor.selector import ENTROPY, FREQUENCY, POLICIES
from advisor.words import DATA_DIR, load_priors, load_words


ALLOWED_NAME = "allowed.txt"
ANSWERS_NAME = "answers.txt"
MATRIX_NAME = "pattern_matrix.bin"


def resolve_paths(args):
    data_dir = Path(args.data_dir)
    allowed = Path(args.allowed) if args.allowed else data_dir / ALLOWED_NAME
    answers = Path(args.answers) if args.answers else data_dir / ANSWERS_NAME
    matrix = Path(args.matrix) if args.matrix else data_dir / MATRIX_NAME
    return allowed, answers, matrix


def run_build(allowed_path, answers_path, matrix_path, batch_size):
    answers, allowed = load_words(allowed_path, answers_path)
    load_or_build_matrix(
        allowed,
        answers,
        matrix_path,
        allowed_path=allowed_path,
        answers_path=answers_path,
        batch_size=batch_size,
    )


def print_constraints(constraints):
    if not constraints:
        print("No feedback yet: ranking against every possible answer.")
        return
    print("Feedback so far:")
    for guess, code in constraints:
        print(f"  {guess} {format_pattern(code)} ({code})")


def print_contradiction():
    print("\nNo possibilities left (check guesses/patterns).")
    raise SystemExit(1)


def run_status(engine, constraints):
    candidates = engine.reduce(constraints)
    status = engine.status(candidates)
    print(f"\nPossible answers left: {status.candidate_count}")
    if status.sample_words:
        more = " ..." if status.candidate_count > len(status.sample_words) else ""
        print("Sample: " + " ".join(status.sample_words) + more)
    print(f"Pattern matrix loaded: {'yes' if status.has_precomputed_matrix else 'no'}")
    print("Methods: " + ", ".join(engine.methods()))


def run_suggest(engine, constraints, method, priors):
    suggestion = engine.suggest(constraints, method, priors)
    if suggestion.contradiction:
        print_contradiction()

    print(f"\nPossible answers left: {suggestion.candidate_count}")
    print("Sample: " + " ".join(suggestion.sample))
    if suggestion.candidate_count == 1:
        print(f"\nThe answer is: {suggestion.next_guess}")
    else:
        print(f"\nNext guess ({suggestion.method}): {suggestion.next_guess}")


def run_top(engine, constraints, method, priors, top):
    candidates = engine.reduce(constraints)
    if candidates.size == 0:
        print_contradiction()

    answer_set = set(engine.answers[i] for i in candidates)
    print(f"\nPossible answers left: {candidates.size}")
    if candidates.size == 1:
        print(f"\nThe answer is: {engine.answers[int(candidates[0])]}")
        return

    unit = {"frequency": "letter score", "entropy": "bits", "expected": "guesses"}
    ranked = engine.rank(method, candidates, priors, top=top, show_progress=True)

    print(f"\nTop guesses by {method}:")
    print(f"Legend: word [flag]: {unit[method]}")
    print("flag: [+] still a possible answer, [-] not a possible answer")
    for word, value in ranked:
        flag = "+" if word in answer_set else "-"
        print(f"{word} [{flag}]: {value:.4f}")


def positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Wordle next-guess advisor (letter frequency, entropy, expected score)."
    )
    parser.add_argument(
        "-guess",
        nargs=2,
        action="append",
        metavar=("WORD", "PATTERN"),
        default=[],
        help="A guess already played and the feedback it got (repeatable, in order).",
    )
    parser.add_argument(
        "-method",
        choices=POLICIES + ("fast",),
        default=None,
        help="Ranking policy (default: entropy with a matrix, else frequency).",
    )
    parser.add_argument(
        "-top",
        type=positive_int,
        default=None,
        help="List the N best guesses with their scores.",
    )
    parser.add_argument(
        "-status",
        action="store_true",
        help=f"Only show the number of answers left and up to {SAMPLE_SIZE} of them.",
    )
    parser.add_argument(
        "-priors",
        type=str,
        default=None,
        help="CSV file of word,weight answer priors (default: uniform).",
    )
    parser.add_argument(
        "-build",
        action="store_true",
        help="Build the pattern matrix file first if it is missing or out of date.",
    )
    parser.add_argument(
        "-batch-size",
        type=positive_int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Guess rows computed per batch while building (default: {DEFAULT_BATCH_SIZE}).",
    )
    parser.add_argument(
        "-data-dir",
        type=str,
        default=str(DATA_DIR),
        help="Directory holding the word lists and matrix file.",
    )
    parser.add_argument("-allowed", type=str, default=None, help="Allowed guesses file.")
    parser.add_argument("-answers", type=str, default=None, help="Possible answers file.")
    parser.add_argument("-matrix", type=str, default=None, help="Pattern matrix file.")
    parser.add_argument(
        "-lenient",
        action="store_true",
        help="Run without the matrix instead of failing when it does not match the lists.",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    allowed_path, answers_path, matrix_path = resolve_paths(args)

    try:
        if args.build:
            run_build(allowed_path, answers_path, matrix_path, args.batch_size)
            if not args.guess and args.top is None and not args.status:
                return

        engine = Engine.from_files(allowed_path, answers_path, matrix_path, strict=not args.lenient)
        priors = load_priors(args.priors) if args.priors else None
        method = args.method or (ENTROPY if engine.has_matrix else FREQUENCY)
        if method == "fast":
            method = FREQUENCY
        constraints = [(word.lower(), parse_pattern(pattern)) for word, pattern in args.guess]

        print_constraints(constraints)
        if args.status:
            run_status(engine, constraints)
        elif args.top is not None:
            run_top(engine, constraints, method, priors, args.top)
        else:
            run_suggest(engine, constraints, method, priors)
    except (AdvisorError, OSError) as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
