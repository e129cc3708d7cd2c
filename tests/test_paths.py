from datetime import datetime

import pytest

from simple_archiver import paths


FIXED_NOW = datetime(2024, 3, 9, 14, 5, 7, 999999)


def fixed_clock():
    return FIXED_NOW


def test_normalize_path_collapses_separators():
    assert paths.normalize_path("//Notes\\\\daily//todo.md/") == "Notes/daily/todo.md"


@pytest.mark.parametrize("raw", ["", "/", "///", "\\"])
def test_normalize_path_empty_is_root(raw):
    assert paths.normalize_path(raw) == "/"


def test_normalize_path_keeps_parent_segments():
    assert paths.normalize_path("Notes/../todo.md") == "Notes/../todo.md"


def test_normalize_path_replaces_non_breaking_space():
    assert paths.normalize_path("My\u00a0Notes/todo.md") == "My Notes/todo.md"


@pytest.mark.parametrize(
    "path",
    ["Notes/todo.md", "todo.md", "Archive2/todo.md", "Archives", "Notes/Archive/todo.md"],
)
def test_is_archived_false_outside_prefix(path):
    assert not paths.is_archived(path, "Archive")


@pytest.mark.parametrize("path", ["Archive", "Archive/todo.md", "Archive/Notes/todo.md"])
def test_is_archived_true_inside_prefix(path):
    assert paths.is_archived(path, "Archive")


def test_is_archived_nested_archive_folder():
    assert paths.is_archived("Old/Archive/todo.md", "Old/Archive/")
    assert not paths.is_archived("Old/todo.md", "Old/Archive")


def test_to_archive_path():
    assert paths.to_archive_path("Notes/todo.md", "Archive") == "Archive/Notes/todo.md"
    assert paths.to_archive_path("todo.md", "Archive/") == "Archive/todo.md"


def test_to_archive_parent_path_maps_root_to_archive_folder():
    assert paths.to_archive_parent_path("/", "Archive") == "Archive"
    assert paths.to_archive_parent_path("Notes/daily", "Archive") == "Archive/Notes/daily"


@pytest.mark.parametrize("item_path", ["todo.md", "Notes/todo.md", "a/b/c/d.txt", "Projects"])
@pytest.mark.parametrize("archive_folder", ["Archive", "Old/Archive"])
def test_archive_path_round_trip(item_path, archive_folder):
    archived = paths.to_archive_path(item_path, archive_folder)
    assert paths.from_archive_path(archived, archive_folder) == item_path


@pytest.mark.parametrize("path", ["Notes/todo.md", "Archive2/todo.md", "Archive"])
def test_from_archive_path_requires_prefix(path):
    with pytest.raises(ValueError):
        paths.from_archive_path(path, "Archive")


def test_parent_path():
    assert paths.parent_path("Notes/daily/todo.md") == "Notes/daily"
    assert paths.parent_path("todo.md") == "/"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("notes.md", ("notes", ".md")),
        ("backup.tar.gz", ("backup.tar", ".gz")),
        (".env", (".env", "")),
        ("README", ("README", "")),
    ],
)
def test_split_name(name, expected):
    assert paths.split_name(name) == expected


def test_unique_renamed_path_uses_timestamp():
    result = paths.unique_renamed_path("todo.md", "Archive/Notes", lambda _: False, now=fixed_clock)
    assert result == "Archive/Notes/todo-20240309-140507.md"


def test_unique_renamed_path_in_vault_root():
    result = paths.unique_renamed_path("todo.md", "/", lambda _: False, now=fixed_clock)
    assert result == "todo-20240309-140507.md"


def test_unique_renamed_path_keeps_dotfile_name_whole():
    result = paths.unique_renamed_path(".env", "Archive", lambda _: False, now=fixed_clock)
    assert result == "Archive/.env-20240309-140507"


def test_unique_renamed_path_appends_counter_on_collision():
    taken = {
        "Archive/todo-20240309-140507.md",
        "Archive/todo-20240309-140507-1.md",
        "Archive/todo-20240309-140507-2.md",
    }
    result = paths.unique_renamed_path("todo.md", "Archive", taken.__contains__, now=fixed_clock)
    assert result == "Archive/todo-20240309-140507-3.md"
    assert result not in taken


def test_unique_renamed_path_picks_smallest_free_counter():
    taken = {"Archive/todo-20240309-140507.md", "Archive/todo-20240309-140507-2.md"}
    result = paths.unique_renamed_path("todo.md", "Archive", taken.__contains__, now=fixed_clock)
    assert result == "Archive/todo-20240309-140507-1.md"
