import pytest

from advisor.engine import Engine
from advisor.matrix import build_matrix, build_matrix_file


ANSWERS = ["crane", "slate", "trace", "swiss", "speed", "abide", "eerie"]
ALLOWED = [
    "salet",
    "crane",
    "slate",
    "trace",
    "roate",
    "swiss",
    "speed",
    "abide",
    "eerie",
    "sassy",
    "fghij",
]


@pytest.fixture
def answers():
    return list(ANSWERS)


@pytest.fixture
def allowed():
    return list(ALLOWED)


@pytest.fixture
def matrix(allowed, answers):
    return build_matrix(allowed, answers)


@pytest.fixture
def engine(allowed, answers, matrix):
    return Engine.from_words(allowed, answers, matrix)


@pytest.fixture
def engine_no_matrix(allowed, answers):
    return Engine.from_words(allowed, answers)


@pytest.fixture
def data_dir(tmp_path, allowed, answers):
    """Word list files in a temporary data directory (no matrix yet)."""
    (tmp_path / "allowed.txt").write_text("\n".join(allowed) + "\n", encoding="utf-8")
    (tmp_path / "answers.txt").write_text("\n".join(answers) + "\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def built_data_dir(data_dir, allowed, answers):
    build_matrix_file(allowed, answers, data_dir / "pattern_matrix.bin", batch_size=4, verbose=False)
    return data_dir
