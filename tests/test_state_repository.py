"""State repository tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from declutter.state import (
    ANALYTICS_FILENAME,
    LEARNING_FILENAME,
    TEMPLATES_FILENAME,
    MissingStateError,
    PersistenceError,
    StateError,
    StateRepository,
)


def test_initialize_creates_directory(tmp_path: Path) -> None:
    """Ensure initialize creates the state directory on demand.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    repo = StateRepository(tmp_path / "state")

    directory = repo.initialize()

    assert directory == tmp_path / "state"
    assert directory.is_dir()


def test_learning_round_trip(tmp_path: Path) -> None:
    """Ensure saved learning data loads back unchanged.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    repo = StateRepository(tmp_path)
    payload = {"userActions": [], "folderPatterns": {"Interviews": {"usage": 3}}}

    repo.save_learning(payload)

    assert (tmp_path / LEARNING_FILENAME).exists()
    assert repo.load_learning() == payload


def test_missing_learning_raises(tmp_path: Path) -> None:
    repo = StateRepository(tmp_path)

    with pytest.raises(MissingStateError):
        repo.load_learning()


def test_templates_and_analytics_default_when_absent(tmp_path: Path) -> None:
    repo = StateRepository(tmp_path)

    assert repo.load_templates() == []
    assert repo.load_analytics() == {}


def test_templates_round_trip(tmp_path: Path) -> None:
    repo = StateRepository(tmp_path)

    repo.save_templates([{"id": "template_1", "name": "Mine", "folders": []}])

    assert (tmp_path / TEMPLATES_FILENAME).exists()
    assert repo.load_templates()[0]["name"] == "Mine"


def test_corrupted_state_raises_persistence_error(tmp_path: Path) -> None:
    """Ensure unparsable files surface as persistence errors.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    repo = StateRepository(tmp_path)
    (tmp_path / ANALYTICS_FILENAME).write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError) as excinfo:
        repo.load_analytics()

    assert isinstance(excinfo.value, StateError)


def test_wrong_document_shape_is_rejected(tmp_path: Path) -> None:
    repo = StateRepository(tmp_path)
    (tmp_path / TEMPLATES_FILENAME).write_text('{"id": "x"}', encoding="utf-8")

    with pytest.raises(PersistenceError):
        repo.load_templates()
