from unittest.mock import MagicMock

from core.filters.duplicate_gate import DuplicateGate


def test_is_duplicate_delegates_to_repository() -> None:
    repository = MagicMock()
    repository.fingerprint_exists.return_value = True

    assert DuplicateGate(repository).is_duplicate("abc") is True
    repository.fingerprint_exists.assert_called_once_with(fingerprint="abc")


def test_split_batch_keeps_first_occurrence() -> None:
    unique, repeats = DuplicateGate.split_batch(["a", "b", "a", "c", "b"])

    assert unique == [0, 1, 3]
    assert repeats == [2, 4]


def test_split_batch_empty() -> None:
    assert DuplicateGate.split_batch([]) == ([], [])
