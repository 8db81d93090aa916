"""
Tests for the command-line entry points.

Only print mode (headless) and argument errors are exercised here; live
mode needs a real terminal.
"""

from pathlib import Path

import pytest

from bonsai import cli
from bonsai.persistence import default_cache_path
from bonsai.serializer import RESET


class TestArguments:
    """Tests for argument parsing into session options."""

    def test_defaults(self) -> None:
        options = cli.options_from_args(cli.build_parser().parse_args([]))
        assert options.life == 32
        assert options.multiplier == 5
        assert options.wait == pytest.approx(4.0)
        assert options.save_path is None
        assert options.load_path is None

    def test_save_without_file_uses_cache(self) -> None:
        """-W without a value saves to the default cache path."""
        args = cli.build_parser().parse_args(["-W", "-l"])
        options = cli.options_from_args(args)
        assert options.save_path == default_cache_path()
        assert options.live

    def test_explicit_paths(self, tmp_path: Path) -> None:
        args = cli.build_parser().parse_args(
            ["--save", str(tmp_path / "a"), "-C", str(tmp_path / "b")]
        )
        options = cli.options_from_args(args)
        assert options.save_path == tmp_path / "a"
        assert options.load_path == tmp_path / "b"

    def test_repeated_verbose(self) -> None:
        options = cli.options_from_args(cli.build_parser().parse_args(["-vv"]))
        assert options.verbosity == 2

    def test_leaf_list(self) -> None:
        options = cli.options_from_args(cli.build_parser().parse_args(["-c", "a,b"]))
        assert options.resolved_leaves == ("a", "b")


class TestMain:
    """Tests for the bonsai command."""

    @pytest.mark.parametrize(
        "argv",
        [["-L", "300"], ["-M", "-1"], ["-b", "9"], ["-t", "0"], ["-s", "0"], ["-c", ","]],
    )
    def test_invalid_options_exit_1(self, argv: list[str], capsys: pytest.CaptureFixture) -> None:
        assert cli.main(argv) == 1
        assert capsys.readouterr().err.startswith("error: ")

    def test_print_mode(self, capsys: pytest.CaptureFixture) -> None:
        assert cli.main(["-p", "-s", "42"]) == 0
        assert capsys.readouterr().out.endswith(RESET + "\n")

    def test_summary_at_high_verbosity(self, capsys: pytest.CaptureFixture) -> None:
        assert cli.main(["-p", "-s", "1", "-vv"]) == 0
        assert "GROWTH SUMMARY" in capsys.readouterr().out


class TestFetchMain:
    def test_print_report(self, capsys: pytest.CaptureFixture) -> None:
        assert cli.fetch_main(["-p", "-o", "bob", "-I"]) == 0
        out = capsys.readouterr().out
        assert "welcome to" in out
        assert "bob" in out
        assert "NODE IP" not in out
