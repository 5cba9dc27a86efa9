"""Tests for the tape-catalog command line."""

import pytest
from click.testing import CliRunner

from tape_catalog.cli.main import tape_catalog_cli
from conftest import STATS, start_line


@pytest.fixture
def config_dir(tmp_path, write_log):
    """Configuration with two tapes, one of them never written."""
    (tmp_path / "tapelist").write_text("20230101 TAPE01 reuse\n0 TAPE02 reuse\n")
    (tmp_path / "disklist").write_text(
        "host1 /disk1 comp-user-tar\n"
        "host1 /disk2 comp-user-tar\n"
        "host2 /home comp-user-tar\n"
    )
    write_log("log.20230101.0", [
        start_line("20230101", "TAPE01"),
        f"SUCCESS taper host1 /disk1 20230101 0 {STATS}",
        f"SUCCESS taper host2 /home 20230101 1 {STATS}",
        "FAIL dumper host1 /disk2 20230101 0 [disk offline]",
    ])
    return tmp_path


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, config_dir, *args):
    return runner.invoke(tape_catalog_cli, [args[0], "--config-dir", str(config_dir), *args[1:]])


class TestFindCommand:
    """Tests for tape-catalog find."""

    def test_lists_everything(self, runner, config_dir):
        result = invoke(runner, config_dir, "find")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[1].startswith("date")
        assert len(lines) == 5
        assert "FAILED (dumper) [disk offline]" in result.output

    def test_sorted_by_host(self, runner, config_dir):
        """Default order puts host1 rows before host2."""
        result = invoke(runner, config_dir, "find")
        rows = result.output.splitlines()[2:]
        assert [row.split()[1] for row in rows] == ["host1", "host1", "host2"]

    def test_dumpspec_selects(self, runner, config_dir):
        result = invoke(runner, config_dir, "find", "host2")
        assert result.exit_code == 0, result.output
        assert "/home" in result.output
        assert "/disk1" not in result.output

    def test_ok_only(self, runner, config_dir):
        result = invoke(runner, config_dir, "find", "--ok-only")
        assert "FAILED" not in result.output
        assert "/disk1" in result.output

    def test_level_filter(self, runner, config_dir):
        result = invoke(runner, config_dir, "find", "--level", "1")
        assert "/home" in result.output
        assert "/disk1" not in result.output

    def test_bad_pattern(self, runner, config_dir):
        """An invalid host pattern is reported and the command fails."""
        result = invoke(runner, config_dir, "find", "h[1")
        assert result.exit_code == 1
        assert 'bad hostname regex "h[1"' in result.output

    def test_bad_sort_order(self, runner, config_dir):
        result = invoke(runner, config_dir, "find", "--sort", "xyz")
        assert result.exit_code == 2

    def test_no_logs(self, runner, tmp_path):
        """A configuration without run logs lists nothing."""
        (tmp_path / "tapelist").write_text("0 TAPE01\n")
        (tmp_path / "disklist").write_text("host1 /disk1\n")
        (tmp_path / "log").mkdir()
        result = invoke(runner, tmp_path, "find")
        assert result.exit_code == 0, result.output
        assert "No dump to list" in result.output

    def test_missing_tapelist(self, runner, tmp_path):
        (tmp_path / "disklist").write_text("host1 /disk1\n")
        result = invoke(runner, tmp_path, "find")
        assert result.exit_code == 1
        assert "tapelist" in result.output

    def test_holding_dumps_listed(self, runner, config_dir, write_holding, holding_dir):
        write_holding("20230102", "host1._disk2.0", "AMANDA: FILE 20230102 host1 /disk2 lev 0 comp N")
        result = invoke(runner, config_dir, "find", "host1", "/disk2", "--holding-dir", str(holding_dir))
        assert result.exit_code == 0, result.output
        assert "host1._disk2.0" in result.output

        result = invoke(
            runner, config_dir, "find", "host1", "/disk2", "--ok-only",
            "--holding-dir", str(holding_dir), "--no-holding",
        )
        assert "No dump to list" in result.output


class TestLogsCommand:
    """Tests for tape-catalog logs."""

    def test_lists_logs(self, runner, config_dir):
        result = invoke(runner, config_dir, "logs")
        assert result.exit_code == 0, result.output
        assert "log.20230101.0" in result.output.splitlines()


class TestHoldingCommand:
    """Tests for tape-catalog holding."""

    def test_lists_matching_files(self, runner, config_dir, write_holding, holding_dir):
        write_holding("20230102", "host1._disk1.0", "AMANDA: FILE 20230102 host1 /disk1 lev 0 comp N")
        write_holding("20230102", "host2._home.0", "AMANDA: FILE 20230102 host2 /home lev 0 comp N")
        result = invoke(runner, config_dir, "holding", "host2", "--holding-dir", str(holding_dir))
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 1
        assert lines[0].endswith("host2._home.0")


def test_version(runner):
    result = runner.invoke(tape_catalog_cli, ["--version"])
    assert result.exit_code == 0
