"""
Unit tests for project_prefs/cli/

Coverage plan
─────────────
arg parsing   → global options and subcommands
commands      → list / get / set / delete / set helpers / move / sort / info
main()        → exit codes and error reporting, edit without PyQt6
"""

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _parse(args: list[str]):
    """Call the CLI argument parser and return the parsed namespace."""
    from project_prefs.cli.main import build_parser
    parser = build_parser()
    return parser.parse_args(args)


@pytest.fixture
def store(tmp_path):
    """Fresh PrefsStore for CLI command tests."""
    from project_prefs.store.prefs_store import PrefsStore
    return PrefsStore.open(tmp_path / "cli_prefs.json", default_revision=2)


@pytest.fixture
def prefs_file(tmp_path, monkeypatch):
    """Path used by main(); environment overrides cleared."""
    monkeypatch.delenv("PROJECT_PREFS_PATH", raising=False)
    monkeypatch.delenv("PROJECT_PREFS_REVISION", raising=False)
    return str(tmp_path / "main_prefs.json")


# ─────────────────────────────────────────────────────────────────────────────
# 1. Argument parsing
# ─────────────────────────────────────────────────────────────────────────────

class TestArgParsing:

    def test_set_parses_key_values_and_type(self):
        ns = _parse(["set", "recent", "a", "b", "--type", "set"])
        assert ns.subcommand == "set"
        assert ns.key == "recent"
        assert ns.values == ["a", "b"]
        assert ns.type == "set"

    def test_set_type_defaults_to_string(self):
        ns = _parse(["set", "name", "value"])
        assert ns.type == "string"

    def test_global_path_and_revision(self):
        ns = _parse(["--path", "p.json", "--revision", "4", "info"])
        assert ns.path == "p.json"
        assert ns.revision == 4

    def test_move_parses_index_and_direction(self):
        ns = _parse(["move", "3", "up"])
        assert ns.index == 3
        assert ns.direction == "up"

    def test_unknown_type_rejected(self):
        with pytest.raises(SystemExit):
            _parse(["set", "k", "v", "--type", "vector"])


# ─────────────────────────────────────────────────────────────────────────────
# 2. Commands
# ─────────────────────────────────────────────────────────────────────────────

class TestCommands:

    def test_list_empty_store(self, store, capsys):
        from project_prefs.cli.main import cmd_list
        cmd_list(store)
        assert "0 preferences" in capsys.readouterr().out

    def test_list_shows_key_type_and_value(self, store, capsys):
        from project_prefs.cli.main import cmd_list
        store.set_int("window_width", 1280)
        cmd_list(store)
        out = capsys.readouterr().out
        assert "window_width" in out
        assert "Int" in out
        assert "1280" in out

    def test_list_prefix_filters(self, store, capsys):
        from project_prefs.cli.main import cmd_list
        store.set_int("editor.width", 1)
        store.set_int("build.jobs", 4)
        cmd_list(store, prefix="editor.")
        out = capsys.readouterr().out
        assert "editor.width" in out
        assert "build.jobs" not in out

    def test_set_bool_then_get(self, store, capsys):
        from project_prefs.cli.main import cmd_get, cmd_set
        cmd_set(store, "flag", ["TRUE"], "bool")
        assert store.get_bool("flag", False) is True
        cmd_get(store, "flag")
        assert capsys.readouterr().out.strip() == "true"

    def test_set_with_set_type_stores_all_values(self, store):
        from project_prefs.cli.main import cmd_set
        cmd_set(store, "recent", ["a", "b", "a"], "set")
        assert store.get_set("recent", []) == ["a", "b"]

    def test_set_scalar_with_many_values_rejected(self, store):
        from project_prefs.cli.main import cmd_set
        with pytest.raises(ValueError):
            cmd_set(store, "n", ["1", "2"], "int")

    def test_set_invalid_int_rejected(self, store):
        from project_prefs.cli.main import cmd_set
        with pytest.raises(ValueError):
            cmd_set(store, "n", ["abc"], "int")

    def test_get_missing_raises_key_error(self, store):
        from project_prefs.cli.main import cmd_get
        with pytest.raises(KeyError):
            cmd_get(store, "missing")

    def test_delete(self, store):
        from project_prefs.cli.main import cmd_delete
        store.set_int("n", 1)
        cmd_delete(store, "n")
        assert not store.has_key("n")

    def test_set_helpers(self, store):
        from project_prefs.cli.main import cmd_add_to_set, cmd_remove_from_set
        cmd_add_to_set(store, "recent", "a")
        cmd_add_to_set(store, "recent", "b")
        cmd_remove_from_set(store, "recent", "a")
        assert store.get_set("recent", []) == ["b"]

    def test_move_saves(self, store):
        from project_prefs.cli.main import cmd_move
        store.set_int("a", 0)
        store.set_int("b", 0)
        assert cmd_move(store, 1, "up") == 0
        assert not store.dirty
        assert [r.key for r in store.records] == ["b", "a"]

    def test_sort_saves(self, store, capsys):
        from project_prefs.cli.main import cmd_sort
        store.set_int("b", 0)
        store.set_int("a", 0)
        cmd_sort(store)
        assert [r.key for r in store.records] == ["a", "b"]
        assert not store.dirty

    def test_info(self, store, capsys):
        from project_prefs.cli.main import cmd_info
        cmd_info(store)
        out = capsys.readouterr().out
        assert "revision: 2" in out
        assert "records:  0" in out


# ─────────────────────────────────────────────────────────────────────────────
# 3. main()
# ─────────────────────────────────────────────────────────────────────────────

class TestMain:

    def test_no_subcommand_prints_help(self, prefs_file, capsys):
        from project_prefs.cli.main import main
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_set_then_get_round_trip(self, prefs_file, capsys):
        from project_prefs.cli.main import main
        assert main(["--path", prefs_file, "set", "zoom", "1.5", "--type", "float"]) == 0
        capsys.readouterr()
        assert main(["--path", prefs_file, "get", "zoom"]) == 0
        assert capsys.readouterr().out.strip() == "1.5"

    def test_revision_applies_to_new_store(self, prefs_file, capsys):
        from project_prefs.cli.main import main
        assert main(["--path", prefs_file, "--revision", "11", "info"]) == 0
        assert "revision: 11" in capsys.readouterr().out

    def test_get_missing_key_returns_1(self, prefs_file, capsys):
        from project_prefs.cli.main import main
        assert main(["--path", prefs_file, "get", "nope"]) == 1
        assert "nope" in capsys.readouterr().err

    def test_type_mismatch_returns_1(self, prefs_file, capsys):
        from project_prefs.cli.main import main
        main(["--path", prefs_file, "set", "n", "1", "--type", "int"])
        assert main(["--path", prefs_file, "add-to-set", "n", "x"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_corrupt_file_returns_1(self, tmp_path, monkeypatch, capsys):
        from project_prefs.cli.main import main
        monkeypatch.delenv("PROJECT_PREFS_REVISION", raising=False)
        bad = tmp_path / "bad.json"
        bad.write_text("[]", encoding="utf-8")
        assert main(["--path", str(bad), "list"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_edit_without_pyqt6_returns_1(self, prefs_file, monkeypatch, capsys):
        import sys
        from project_prefs.cli.main import main
        monkeypatch.setitem(sys.modules, "project_prefs.gui.main_window", None)
        assert main(["--path", prefs_file, "edit"]) == 1
        assert "pip install project-prefs[gui]" in capsys.readouterr().err

    def test_path_from_environment(self, tmp_path, monkeypatch, capsys):
        from project_prefs.cli.main import main
        env_path = tmp_path / "env_prefs.json"
        monkeypatch.setenv("PROJECT_PREFS_PATH", str(env_path))
        monkeypatch.setenv("PROJECT_PREFS_REVISION", "5")
        assert main(["info"]) == 0
        assert env_path.exists()
        assert "revision: 5" in capsys.readouterr().out
