"""Tests for CLI argument parsing."""

from pathlib import Path

import pytest

from clipstash.cli.arg_parser import parse_args


class TestParseArgs:
    """Tests for parse_args()."""

    def test_no_arguments_means_select(self):
        args = parse_args([])
        assert args.command == "select"
        assert args.verbose is False
        assert args.config is None

    def test_daemon_flag(self):
        """`clipstash --daemon` is the same as the daemon subcommand."""
        assert parse_args(["--daemon"]).command == "daemon"

    def test_daemon_subcommand(self):
        assert parse_args(["daemon"]).command == "daemon"

    def test_list_with_limit(self):
        args = parse_args(["list", "-n", "5"])
        assert args.command == "list"
        assert args.limit == 5

    def test_list_without_limit(self):
        assert parse_args(["list"]).limit is None

    @pytest.mark.parametrize(
        "argv",
        [
            ["-v", "daemon"],
            ["daemon", "-v"],
        ],
    )
    def test_verbose_before_or_after_subcommand(self, argv):
        assert parse_args(argv).verbose is True

    def test_subcommand_does_not_reset_parent_config(self):
        args = parse_args(["--config", "/etc/clip.json", "select"])
        assert args.config == Path("/etc/clip.json")

    def test_subcommand_config(self):
        args = parse_args(["list", "-c", "custom.json"])
        assert args.config == Path("custom.json")

    def test_unknown_subcommand_exits(self):
        with pytest.raises(SystemExit):
            parse_args(["frobnicate"])
