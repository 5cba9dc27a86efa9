"""Root pytest configuration shared across the test suite.

Fixtures here build small backup configurations on disk: a run log
directory, a tapelist, a disklist and holding directories.
"""

from pathlib import Path

import pytest

from tape_catalog.inventory import Disk, DiskList


# ---------------------------------------------------------------------------
# Log line builders
# Record lines carry a trailing stats block; lines without one are
# malformed as far as the catalog is concerned.
# ---------------------------------------------------------------------------

STATS = "[sec 1.0 kb 1024 kps 1024.0]"


def start_line(datestamp: str, label: str) -> str:
    return f"START taper datestamp {datestamp} label {label} tape 1"


@pytest.fixture
def disklist():
    """Inventory with three scheduled disks and one unscheduled disk."""
    return DiskList([
        Disk("host1", "/disk1", todo=True),
        Disk("host1", "/disk2", todo=True),
        Disk("host2", "/home", todo=True),
        Disk("host1", "/my disk", todo=True),
        Disk("host3", "/unsched", todo=False),
    ])


@pytest.fixture
def log_dir(tmp_path):
    """Empty run log directory."""
    path = tmp_path / "log"
    path.mkdir()
    return path


@pytest.fixture
def write_log(log_dir):
    """Write a run log; returns its path.

    Usage:
        write_log("log.20230101.0", [line, line, ...])
    """
    def _write(name: str, lines: list[str]) -> Path:
        path = log_dir / name
        path.write_text("".join(line + "\n" for line in lines))
        return path
    return _write


@pytest.fixture
def holding_dir(tmp_path):
    """Empty holding directory."""
    path = tmp_path / "holding"
    path.mkdir()
    return path


@pytest.fixture
def write_holding(holding_dir):
    """Write a holding file under <holding>/<datestamp>/<name>; returns its path."""
    def _write(datestamp: str, name: str, header: str) -> Path:
        date_dir = holding_dir / datestamp
        date_dir.mkdir(exist_ok=True)
        path = date_dir / name
        path.write_text(header + "\n\014\n" + "x" * 64)
        return path
    return _write
