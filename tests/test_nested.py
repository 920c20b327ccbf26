from __future__ import annotations

import pytest

from kvconf.mapping.errors import StructuralConflictError
from kvconf.mapping.nested import flatten_tree, reconstruct


def test_keys_are_split_level_by_level() -> None:
    tree = reconstruct({"apps.bash.title": "Bash", "apps.bash.icon": "terminal", "log_level": "DEBUG"})

    assert tree == {
        "apps": {"bash": {"title": "Bash", "icon": "terminal"}},
        "log_level": "DEBUG",
    }


def test_splitting_is_reversible() -> None:
    flat = {"a.b.c": "1", "a.b.d": "2", "a.e": "3", "f": "4"}

    assert flatten_tree(reconstruct(flat)) == flat


def test_custom_separator() -> None:
    assert reconstruct({"a/b": "1"}, sep="/") == {"a": {"b": "1"}}
    assert flatten_tree({"a": {"b": "1"}}, sep="/") == {"a/b": "1"}


@pytest.mark.parametrize(
    "flat",
    [
        {"apps.x": "1", "apps.x.y": "2"},
        {"apps.x.y": "2", "apps.x": "1"},
    ],
)
def test_leaf_branch_conflict_is_an_error_in_any_order(flat: dict[str, str]) -> None:
    with pytest.raises(StructuralConflictError) as exc:
        reconstruct(flat)

    assert exc.value.path in {"apps.x", "apps.x.y"}


@pytest.mark.parametrize("key", ["", "a..b", ".a", "a."])
def test_empty_segments_are_rejected(key: str) -> None:
    with pytest.raises(StructuralConflictError):
        reconstruct({key: "v"})


def test_result_does_not_depend_on_input_order() -> None:
    items = [("x.a", "1"), ("x.b", "2"), ("y", "3")]

    assert reconstruct(dict(items)) == reconstruct(dict(reversed(items)))
