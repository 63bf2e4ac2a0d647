import json

import pytest

from advisor import selector
from advisor.engine import Engine
from advisor.errors import Contradiction, EmptyInput, SizeMismatch, UnsupportedWithoutMatrix
from advisor.matrix import build_matrix, build_matrix_file
from advisor.patterns import pattern_code
from advisor.words import clean_words, load_priors, load_word_list


def test_single_candidate_short_circuits(monkeypatch):
    allowed = ["abcde", "fghij", "klmno"]
    answers = ["abcde", "fghij"]
    engine = Engine.from_words(allowed, answers, build_matrix(allowed, answers))

    candidates = engine.reduce([("abcde", 242)])
    assert candidates.tolist() == [0]

    def no_ranking(*args, **kwargs):
        raise AssertionError("ranking should not run for a single candidate")

    monkeypatch.setattr(selector, "select", no_ranking)
    for method in ("frequency", "entropy", "expected"):
        suggestion = engine.suggest([("abcde", 242)], method)
        assert suggestion.next_guess == "abcde"
        assert suggestion.candidate_count == 1
        assert suggestion.sample == ["abcde"]


def test_suggest_with_each_method(engine):
    constraints = [("fghij", pattern_code("fghij", "speed"))]
    candidates = engine.reduce(constraints)
    assert candidates.size > 1
    for method in ("frequency", "entropy", "expected"):
        suggestion = engine.suggest(constraints, method)
        assert suggestion.next_guess == engine.select(method, candidates, {w: 1 for w in engine.answers})
        assert suggestion.candidate_count == candidates.size
        assert suggestion.method == method
        assert not suggestion.contradiction


def test_suggest_accepts_fast_alias(engine):
    assert engine.suggest([], "fast").method == "frequency"


def test_suggest_contradiction(engine):
    suggestion = engine.suggest([("crane", 242), ("slate", 242)], "entropy")
    assert suggestion.contradiction
    assert suggestion.next_guess is None
    assert suggestion.to_dict() == {
        "error": "no possibilities left (check patterns/guesses)",
        "possibleCount": 0,
        "sample": [],
    }


def test_select_on_empty_set_raises(engine):
    with pytest.raises(Contradiction):
        engine.select("entropy", [])


def test_suggestion_serialises(engine):
    suggestion = engine.suggest([("fghij", "bbbbb")], "entropy")
    payload = json.loads(json.dumps(suggestion.to_dict()))
    assert payload["nextGuess"] == suggestion.next_guess
    assert payload["possibleCount"] == suggestion.candidate_count
    assert payload["sample"] == suggestion.sample


def test_reduce_accepts_pattern_forms(engine):
    as_int = engine.reduce([("sassy", 65)])
    as_digits = engine.reduce([("sassy", "20120")])
    as_colours = engine.reduce([("sassy", "gbygb")])
    assert as_int.tolist() == as_digits.tolist() == as_colours.tolist()
    assert [engine.answers[i] for i in as_int] == ["swiss"]


def test_matrix_and_no_matrix_engines_agree(engine, engine_no_matrix):
    constraints = [("roate", pattern_code("roate", "abide")), ("pious", pattern_code("pious", "abide"))]
    assert engine.reduce(constraints).tolist() == engine_no_matrix.reduce(constraints).tolist()
    assert engine.suggest(constraints, "frequency") == engine_no_matrix.suggest(constraints, "frequency")


def test_engine_without_matrix(engine_no_matrix):
    assert not engine_no_matrix.has_matrix
    assert engine_no_matrix.methods() == ("frequency",)
    assert engine_no_matrix.suggest([], "frequency").next_guess in engine_no_matrix.allowed
    with pytest.raises(UnsupportedWithoutMatrix):
        engine_no_matrix.suggest([], "entropy")
    with pytest.raises(UnsupportedWithoutMatrix):
        engine_no_matrix.select("expected", [0, 1])


def test_status(engine, engine_no_matrix):
    status = engine.status(range(len(engine.answers)))
    assert status.candidate_count == len(engine.answers)
    assert status.sample_words == list(engine.answers)
    assert status.has_precomputed_matrix
    assert not engine_no_matrix.status([]).has_precomputed_matrix
    assert engine.status([2, 0], sample_size=1).sample_words == ["trace"]


def test_words(engine):
    words = engine.words()
    assert words["allowed"] == list(engine.allowed)
    assert words["answers"] == list(engine.answers)
    assert words["hasMatrix"] is True


def test_from_words_checks_lists(allowed, answers, matrix):
    with pytest.raises(EmptyInput):
        Engine.from_words([], answers)
    with pytest.raises(EmptyInput):
        Engine.from_words(allowed, [])
    with pytest.raises(SizeMismatch):
        Engine.from_words(allowed, answers[:-1], matrix)


def test_from_files_without_matrix(data_dir, capsys):
    engine = Engine.from_files(
        data_dir / "allowed.txt", data_dir / "answers.txt", data_dir / "pattern_matrix.bin"
    )
    assert not engine.has_matrix
    assert "No pattern matrix found" in capsys.readouterr().out


def test_from_files_with_matrix(built_data_dir, matrix):
    engine = Engine.from_files(
        built_data_dir / "allowed.txt",
        built_data_dir / "answers.txt",
        built_data_dir / "pattern_matrix.bin",
    )
    assert engine.has_matrix
    assert (engine.matrix.data == matrix.data).all()


def test_from_files_mismatched_matrix(data_dir, capsys):
    (data_dir / "pattern_matrix.bin").write_bytes(bytes(10))
    paths = (data_dir / "allowed.txt", data_dir / "answers.txt", data_dir / "pattern_matrix.bin")
    with pytest.raises(SizeMismatch):
        Engine.from_files(*paths)
    engine = Engine.from_files(*paths, strict=False)
    assert not engine.has_matrix
    assert "Failed to load pattern matrix" in capsys.readouterr().out


def test_word_list_cleaning(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("  CRANE \nslate\ntoolong\nab1de\n\nslate\nfour\nTrace\r\n", encoding="utf-8")
    assert load_word_list(path) == ["crane", "slate", "slate", "trace"]
    assert clean_words(["crane", "slate", "crane"]) == ["crane", "slate", "crane"]
    assert clean_words(["crane\n", "slate\r\n"]) == ["crane", "slate"]


def test_repeated_words_line_up_with_matrix_file(tmp_path):
    allowed = ["crane", "slate", "crane", "trace"]
    answers = ["crane", "trace", "trace"]
    (tmp_path / "allowed.txt").write_text("\n".join(allowed) + "\n", encoding="utf-8")
    (tmp_path / "answers.txt").write_text("\n".join(answers) + "\n", encoding="utf-8")
    # a file with one byte per line of the lists, repeats included
    build_matrix_file(allowed, answers, tmp_path / "pattern_matrix.bin", verbose=False)

    engine = Engine.from_files(
        tmp_path / "allowed.txt", tmp_path / "answers.txt", tmp_path / "pattern_matrix.bin"
    )
    assert engine.allowed == tuple(allowed)
    assert engine.answers == tuple(answers)
    assert engine.matrix.guess_index_of("crane") == 0
    assert engine.matrix.answer_index_of("trace") == 1
    assert engine.reduce([("crane", pattern_code("crane", "trace"))]).tolist() == [1, 2]
    assert engine.suggest([], "entropy").next_guess in allowed


def test_load_priors(tmp_path):
    path = tmp_path / "priors.csv"
    path.write_text("word,weight\ncrane,3\nSLATE,0.5\nbad!!,2\n", encoding="utf-8")
    assert load_priors(path) == {"crane": 3.0, "slate": 0.5}


def test_load_priors_rejects_negative(tmp_path):
    path = tmp_path / "priors.csv"
    path.write_text("crane,-1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_priors(path)


def test_priors_change_expected_choice(engine):
    candidates = engine.reduce([])
    certain = {"eerie": 1.0}
    # all the weight on one answer makes it the obvious pick
    assert engine.select("expected", candidates, certain) == "eerie"
