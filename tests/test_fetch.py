"""
Tests for the system information report.

Probes read from files under tmp_path so the tests do not depend on the
machine they run on.
"""

import io
import sys
from pathlib import Path

import pytest

from bonsai import fetch, serializer
from bonsai.display import HeadlessDisplay
from bonsai.fetch import FetchSettings, SystemInfo
from bonsai.serializer import color_code


def make_test_info() -> SystemInfo:
    return SystemInfo(
        hostname="host",
        os="Test OS (1.0)",
        uptime="1h 2m",
        hardware="Test CPU 4 core",
        memory="100 MB / 200 MB",
        storage="1.0G / 2.0G",
        bandwidth="1000 Mbps (Ethernet)",
        ip="10.0.0.2",
        local_time="January 01 2030, 12:00:00 PM UTC",
    )


class TestLinkDetection:
    """Tests for e-mail and URL heuristics."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("help@example.com", True),
            ("@example.com", False),
            ("a b@example.com", False),
            ("a@.com", False),
            ("a@example.", False),
            ("a@example", False),
        ],
    )
    def test_email(self, text: str, expected: bool) -> None:
        assert fetch.looks_like_email(text) == expected

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("https://example.com", True),
            ("http://x", True),
            ("docs.example.com/start", True),
            ("help@example.com", False),
            ("no dots here", False),
            ("see docs. now", False),
        ],
    )
    def test_url(self, text: str, expected: bool) -> None:
        assert fetch.looks_like_url(text) == expected


class TestProbes:
    """Tests for individual system probes."""

    def test_format_uptime(self) -> None:
        assert fetch.format_uptime(90061) == "1d 1h 1m"
        assert fetch.format_uptime(3660) == "1h 1m"
        assert fetch.format_uptime(59) == "0m"

    def test_uptime_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "uptime"
        path.write_text("3700.5 1234.0\n")
        assert fetch.uptime_info(path) == "1h 1m"
        assert fetch.uptime_info(tmp_path / "missing") == fetch.UNKNOWN

    def test_cpu_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cpuinfo"
        path.write_text(
            "processor\t: 0\nmodel name\t: Test CPU\n\n"
            "processor\t: 1\nmodel name\t: Test CPU\n"
        )
        assert fetch.cpu_info(path) == "Test CPU 2 core"

    def test_memory_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "meminfo"
        path.write_text("MemTotal:       2048000 kB\nMemFree: 1 kB\nMemAvailable:   1024000 kB\n")
        assert fetch.memory_info(path) == "1000 MB / 2000 MB"
        assert fetch.memory_info(tmp_path / "missing") == fetch.UNKNOWN

    def test_bandwidth_from_sysfs(self, tmp_path: Path) -> None:
        for name, state, speed in [("eth0", "down", "100"), ("wlan0", "up", "300")]:
            (tmp_path / name).mkdir()
            (tmp_path / name / "operstate").write_text(state + "\n")
            (tmp_path / name / "speed").write_text(speed + "\n")
        assert fetch.bandwidth_info(tmp_path) == "300 Mbps (Wi-Fi)"

    def test_bandwidth_unknown(self, tmp_path: Path) -> None:
        assert fetch.bandwidth_info(tmp_path) == fetch.UNKNOWN

    @pytest.mark.skipif(sys.platform == "win32", reason="reads os-release")
    def test_os_release(self, tmp_path: Path) -> None:
        path = tmp_path / "os-release"
        path.write_text('NAME="Test"\nPRETTY_NAME="Test Linux 1"\n')
        assert fetch.os_info(path).startswith("Test Linux 1 (")

    def test_storage(self) -> None:
        assert fetch.storage_info(".").endswith("G")

    def test_hostname_lowercase(self) -> None:
        name = fetch.hostname()
        assert name == name.lower()


class TestSettings:
    """Tests for config files and overrides."""

    def test_files_then_overrides(self, tmp_path: Path) -> None:
        (tmp_path / "owner").write_text("alice\nignored\n")
        (tmp_path / "location").write_text("Lab 3\n")
        settings = fetch.load_settings(tmp_path, {"location": "Lab 4", "docs": None}, hide_ip=True)

        assert settings.owner == "alice"
        assert settings.location == "Lab 4"
        assert settings.support == ""
        assert settings.docs == ""
        assert settings.hide_ip


class TestRenderReport:
    """Tests for the report layout."""

    def test_fields_and_welcome(self) -> None:
        report = fetch.render_report(make_test_info(), FetchSettings(owner="alice"), 70)
        lines = report.splitlines()

        assert lines[0] == " " * 23 + "welcome to host - alice"
        assert f"{fetch.CYAN}{'OS':<18}{fetch.RESET} Test OS (1.0)" in report
        for label in ("UPTIME", "HARDWARE", "MEMORY", "STORAGE", "NODE IP", "LOCAL TIME"):
            assert label in report
        assert "LOCATION" not in report
        assert "SUPPORT" not in report

    def test_links(self) -> None:
        settings = FetchSettings(support="help@example.com", docs="docs.example.com")
        report = fetch.render_report(make_test_info(), settings, 70)
        assert "\033]8;;mailto:help@example.com\ahelp@example.com\033]8;;\a" in report
        assert "\033]8;;https://docs.example.com\adocs.example.com\033]8;;\a" in report

    def test_plain_support_text(self) -> None:
        settings = FetchSettings(support="call the desk")
        report = fetch.render_report(make_test_info(), settings, 70)
        assert "call the desk" in report
        assert "\033]8;;" not in report

    def test_hidden_sections(self) -> None:
        settings = FetchSettings(support="help@example.com", hide_support=True, hide_ip=True)
        report = fetch.render_report(make_test_info(), settings, 70)
        assert "NODE IP" not in report
        assert "SUPPORT" not in report

    def test_noir_labels(self) -> None:
        report = fetch.render_report(make_test_info(), FetchSettings(noir=True, location="Lab"), 70)
        assert fetch.CYAN not in report
        assert f"{fetch.BOLD}{'LOCATION':<18}{fetch.RESET} Lab" in report

    def test_label_codes_shared_with_serializer(self) -> None:
        assert fetch.CYAN == color_code(6)
        assert fetch.BOLD is serializer.BOLD
        assert fetch.RESET is serializer.RESET

    def test_centering(self) -> None:
        report = fetch.render_report(make_test_info(), FetchSettings(), 100)
        assert report.splitlines()[2].startswith(" " * 15 + fetch.CYAN)


class TestRunFetch:
    def test_tree_then_report(self) -> None:
        out = io.StringIO()
        result = fetch.run_fetch(
            FetchSettings(owner="bob"),
            print_only=True,
            display=HeadlessDisplay(rows=24, cols=80),
            out=out,
            info=make_test_info(),
        )
        text = out.getvalue()

        assert text.startswith("\n")
        assert result.output is not None
        assert text.index(result.output) < text.index("welcome to host - bob")

    def test_tree_options(self) -> None:
        options = fetch.tree_options(noir=True)
        assert options.base == 3
        assert options.print_tree
        assert options.live
        assert options.time_step == pytest.approx(0.003)
        assert not fetch.tree_options(print_only=True).live
