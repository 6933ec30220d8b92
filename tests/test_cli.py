"""Tests for the command line interface."""

import io
import sys

import pytest

from treels import __version__
from treels.cli import initial_settings, main, parse_args
from treels.config import DisplayMode, SortKey, SymlinkMode, TimeField


class FakeTerminal(io.StringIO):
    """Output stream that claims to be a terminal."""

    def isatty(self):
        return True


def parse(*argv, uid=1000, stream=None, environ=None):
    return parse_args(list(argv), stream=stream or io.StringIO(), environ=environ, uid=uid)


class TestDefaults:
    """Test settings before any flag is applied."""

    def test_pipe_defaults_to_single_column(self):
        config, paths = parse()
        assert config.display_mode == DisplayMode.SINGLE_COLUMN
        assert not config.nonprint
        assert paths == []

    def test_terminal_defaults_to_columns(self):
        config, _ = parse(stream=FakeTerminal(), environ={"COLUMNS": "120"})
        assert config.display_mode == DisplayMode.COLUMNS
        assert config.nonprint
        assert config.term_width == 120

    def test_superuser_sees_hidden_entries(self):
        assert parse(uid=0)[0].show_hidden
        assert not parse(uid=1000)[0].show_hidden

    def test_initial_settings_have_no_sort(self):
        assert initial_settings(io.StringIO(), uid=1000)["sort_by"] is None


class TestOverrules:
    """Test that later flags overrule earlier ones."""

    @pytest.mark.parametrize("argv,mode", [
        (["-l1"], DisplayMode.SINGLE_COLUMN),
        (["-1l"], DisplayMode.LONG),
        (["-C", "-x"], DisplayMode.ACROSS),
        (["-xC"], DisplayMode.COLUMNS),
        (["-lm"], DisplayMode.STREAM),
    ])
    def test_display_mode_last_wins(self, argv, mode):
        assert parse(*argv)[0].display_mode == mode

    def test_numeric_long_format(self):
        config, _ = parse("-n")
        assert config.long_format and config.numeric_only

    def test_long_clears_numeric(self):
        assert not parse("-nl")[0].numeric_only
        assert parse("-ln")[0].numeric_only

    @pytest.mark.parametrize("argv,key", [
        (["-t"], SortKey.MTIME),
        (["-tu"], SortKey.ATIME),
        (["-ut"], SortKey.ATIME),
        (["-tc"], SortKey.CTIME),
        (["-uc", "-t"], SortKey.CTIME),
        (["-cu", "-t"], SortKey.ATIME),
        (["-tS"], SortKey.SIZE),
        (["-St"], SortKey.MTIME),
        (["-u"], SortKey.NAME),
    ])
    def test_sort_key(self, argv, key):
        assert parse(*argv)[0].sort_key == key

    def test_time_field_without_time_sort(self):
        assert parse("-lc")[0].time_field == TimeField.STATUS

    def test_list_directory_clears_recursion(self):
        config, _ = parse("-Rd")
        assert config.list_directory and not config.recursive

    def test_recursion_after_list_directory(self):
        config, _ = parse("-dR")
        assert config.list_directory and config.recursive

    def test_all_and_almost_all(self):
        config, _ = parse("-a")
        assert config.show_hidden and config.see_dot
        config, _ = parse("-A")
        assert config.show_hidden and not config.see_dot


class TestFlags:
    """Test the remaining flags map to configuration fields."""

    @pytest.mark.parametrize("flag,field", [
        ("-F", "classify"),
        ("-p", "classify_dirs"),
        ("-i", "show_inode"),
        ("-s", "show_blocks"),
        ("-o", "show_flags"),
        ("-q", "nonprint"),
        ("-r", "reverse"),
        ("-f", "no_sort"),
        ("-T", "full_time"),
        ("-R", "recursive"),
        ("-g", "compat_group"),
        ("-W", "whiteout"),
    ])
    def test_boolean_flags(self, flag, field):
        assert getattr(parse(flag)[0], field) is True

    def test_logical_walk(self):
        assert parse("-L")[0].symlink_mode == SymlinkMode.LOGICAL

    def test_kilobyte_blocks(self):
        assert parse("-k")[0].block_size == 1024

    def test_paths_collected(self):
        _, paths = parse("-l", "a", "b")
        assert paths == ["a", "b"]

    def test_unknown_flag(self, capsys):
        with pytest.raises(SystemExit):
            parse("-Z")
        assert "usage:" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            parse("--version")
        assert __version__ in capsys.readouterr().out


class TestMain:
    """Test the entry point end to end."""

    def test_lists_directory(self, tmp_path, monkeypatch):
        (tmp_path / "listed").write_text("")
        out = io.StringIO()
        monkeypatch.setattr(sys, "stdout", out)

        assert main(["-1", str(tmp_path)]) == 0
        assert out.getvalue() == "listed\n"

    def test_missing_path_fails(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdout", io.StringIO())
        assert main([str(tmp_path / "missing")]) == 1
        assert "missing: " in capsys.readouterr().err

    def test_stat_and_follow_options_derived(self):
        options = parse("-l")[0].walk_options()
        assert not options.nostat and not options.comfollow
        options = parse("-1")[0].walk_options()
        assert options.nostat and options.comfollow
        assert not parse("-t")[0].walk_options().nostat
