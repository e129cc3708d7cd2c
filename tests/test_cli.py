import json

import pytest

from simple_archiver import cli, config


def write(path, content: str = "x"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def run_cli(vault, *args):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--vault", str(vault), "--no-color", *args])
    return excinfo.value.code


def test_archive_single_item(vault, capsys):
    write(vault / "Notes" / "todo.md")

    code = run_cli(vault, "archive", "Notes/todo.md")

    assert code == cli.EXIT_OK
    assert "todo.md archived successfully" in capsys.readouterr().out
    assert (vault / "Archive" / "Notes" / "todo.md").exists()


def test_archive_accepts_filesystem_path_inside_vault(vault, capsys):
    note = write(vault / "Notes" / "todo.md")

    code = run_cli(vault, "archive", str(note))

    assert code == cli.EXIT_OK
    assert (vault / "Archive" / "Notes" / "todo.md").exists()


def test_archive_missing_path_is_usage_error(vault, capsys):
    code = run_cli(vault, "archive", "Notes/ghost.md")

    assert code == cli.EXIT_USAGE
    assert "[ERROR] Not found in vault: Notes/ghost.md" in capsys.readouterr().err


def test_archive_already_archived_single_item_fails(vault, capsys):
    write(vault / "Archive" / "todo.md")

    code = run_cli(vault, "archive", "Archive/todo.md")

    assert code == cli.EXIT_FAILED
    assert "Item is already archived" in capsys.readouterr().out


def test_batch_archive_blocked_when_any_item_is_archived(vault, capsys):
    write(vault / "a.md")
    write(vault / "Archive" / "b.md")

    code = run_cli(vault, "archive", "a.md", "Archive/b.md")

    assert code == cli.EXIT_USAGE
    err = capsys.readouterr().err
    assert "Move all to archive is unavailable; already archived: Archive/b.md" in err
    assert (vault / "a.md").exists()


def test_batch_archive_reports_and_notifies(vault, tmp_path, capsys):
    write(vault / "a.md")
    write(vault / "Notes" / "b.md")
    report = tmp_path / "report.json"

    code = run_cli(vault, "--verbose", "--report", str(report), "archive", "a.md", "Notes/b.md")

    assert code == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "2 files archived" in out
    assert "OK  a.md: a.md archived successfully" in out
    data = json.loads(report.read_text())
    assert data["counts"] == {"total": 2, "succeeded": 2, "failed": 0}
    assert data["archive_folder"] == "Archive"


def test_batch_unarchive_blocked_when_any_item_is_not_archived(vault, capsys):
    write(vault / "a.md")
    write(vault / "Archive" / "b.md")

    code = run_cli(vault, "unarchive", "a.md", "Archive/b.md")

    assert code == cli.EXIT_USAGE
    assert "Move all out of archive is unavailable; not archived: a.md" in capsys.readouterr().err


def test_unarchive_single_item(vault, capsys):
    write(vault / "Archive" / "Notes" / "todo.md", "archived")

    code = run_cli(vault, "unarchive", "Archive/Notes/todo.md")

    assert code == cli.EXIT_OK
    assert "todo.md unarchived successfully" in capsys.readouterr().out
    assert (vault / "Notes" / "todo.md").read_text() == "archived"


def test_collision_policy_rename(vault, capsys):
    write(vault / "todo.md", "new")
    write(vault / "Archive" / "todo.md", "old")

    code = run_cli(vault, "--on-conflict", "rename", "archive", "todo.md")

    assert code == cli.EXIT_OK
    assert "todo.md archived as todo-" in capsys.readouterr().out
    assert len(list((vault / "Archive").iterdir())) == 2


def test_collision_prompt_cancel(vault, capsys, monkeypatch):
    write(vault / "todo.md", "new")
    write(vault / "Archive" / "todo.md", "old")
    inputs = iter(["3"])
    monkeypatch.setattr("builtins.input", lambda *args, **kwargs: next(inputs, ""))

    code = run_cli(vault, "archive", "todo.md")

    assert code == cli.EXIT_FAILED
    out = capsys.readouterr().out
    assert "Replace archived item?" in out
    assert "Archive operation cancelled" in out
    assert (vault / "todo.md").read_text() == "new"


def test_collision_prompt_merge(vault, capsys, monkeypatch):
    write(vault / "Projects" / "a.md", "a")
    write(vault / "Archive" / "Projects" / "b.md", "b")
    monkeypatch.setattr("builtins.input", lambda *args, **kwargs: "merge")

    code = run_cli(vault, "archive", "Projects")

    assert code == cli.EXIT_OK
    assert "Merged Projects: 1 file" in capsys.readouterr().out
    assert not (vault / "Projects").exists()


def test_archive_folder_read_from_settings(vault, capsys):
    write(
        vault / ".obsidian" / "plugins" / "simple-archiver" / "data.json",
        json.dumps({"archiveFolder": "Old/Stuff"}),
    )
    write(vault / "todo.md")

    code = run_cli(vault, "archive", "todo.md")

    assert code == cli.EXIT_OK
    assert (vault / "Old" / "Stuff" / "todo.md").exists()


def test_invalid_archive_folder_override_is_usage_error(vault, capsys):
    write(vault / "todo.md")

    code = run_cli(vault, "--archive-folder", "a:b", "archive", "todo.md")

    assert code == cli.EXIT_USAGE
    assert "[ERROR]" in capsys.readouterr().err
    assert (vault / "todo.md").exists()


def test_status_reports_each_path(vault, capsys):
    write(vault / "Archive" / "a.md")
    write(vault / "Notes" / "b.md")

    code = run_cli(vault, "status", "Archive/a.md", "Notes/b.md", "ghost.md")

    assert code == cli.EXIT_FAILED
    out = capsys.readouterr().out
    assert "Archive/a.md: archived" in out
    assert "Notes/b.md: not archived" in out
    assert "ghost.md: not found" in out


def test_config_show_defaults(vault, capsys):
    code = run_cli(vault, "config", "show")

    assert code == cli.EXIT_OK
    assert "Archive folder: Archive (source: settings)" in capsys.readouterr().out


def test_config_set_folder_persists(vault, capsys):
    code = run_cli(vault, "config", "set-folder", "Old/Archive")

    assert code == cli.EXIT_OK
    assert config.load_settings(config.settings_path(str(vault))).archive_folder == "Old/Archive"
    assert "Archive folder: Old/Archive" in capsys.readouterr().out


def test_config_set_folder_rejects_invalid_value(vault, capsys):
    code = run_cli(vault, "config", "set-folder", ".hidden")

    assert code == cli.EXIT_USAGE
    captured = capsys.readouterr()
    assert config.ARCHIVE_FOLDER_RULES in captured.err
    assert "Archive folder: Archive" in captured.out
    assert not (vault / ".obsidian").exists()


def test_vault_from_environment(vault, capsys, monkeypatch):
    write(vault / "todo.md")
    monkeypatch.setenv(config.VAULT_ENV, str(vault))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--no-color", "archive", "todo.md"])

    assert excinfo.value.code == cli.EXIT_OK
    assert (vault / "Archive" / "todo.md").exists()
