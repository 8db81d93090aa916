"""
System information report shown under a bonsai tree.

Each probe reads what the platform offers (procfs, sysfs, os-release,
the socket module) and falls back to "Unknown" rather than raising.
Owner, location, support and docs come from one-line files in the
config directory, overridden by command-line values.
"""

import os
import platform
import shutil
import socket
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from bonsai.display import Display
from bonsai.serializer import BOLD, RESET, color_code
from bonsai.session import SessionOptions, SessionResult, run_session

UNKNOWN = "Unknown"
LABEL_WIDTH = 18
BLOCK_WIDTH = 70

CYAN = color_code(6)

if sys.platform == "win32":
    CONFIG_DIR = Path("C:/ProgramData/bonsai-fetch")
else:
    CONFIG_DIR = Path("/etc/bonsai-fetch")

# Interfaces probed for link speed, in order
INTERFACES = (
    "eth0", "eth1",
    "enp0s31f6", "enp0s25", "eno1", "eno2",
    "wlan0", "wlp0s20f3", "wlp2s0",
)

GIB = 1024.0**3


#
# Probes
#


def read_first_line(path: str | os.PathLike) -> str | None:
    """First line of a file without its newline, or None if unreadable."""
    try:
        with open(path) as f:
            line = f.readline()
    except OSError:
        return None
    return line.rstrip("\n")


def format_uptime(seconds: float) -> str:
    days = int(seconds // 86400)
    hours = int((seconds - days * 86400) // 3600)
    minutes = int((seconds - days * 86400 - hours * 3600) // 60)
    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def uptime_info(path: str | os.PathLike = "/proc/uptime") -> str:
    line = read_first_line(path)
    if not line:
        return UNKNOWN
    try:
        return format_uptime(float(line.split()[0]))
    except ValueError:
        return UNKNOWN


def cpu_info(path: str | os.PathLike = "/proc/cpuinfo") -> str:
    """CPU model name and logical core count."""
    try:
        with open(path) as f:
            lines = f.readlines()
    except OSError:
        model = platform.processor() or UNKNOWN
        return f"{model} {os.cpu_count() or 0} core"

    model = UNKNOWN
    cores = 0
    for line in lines:
        if line.startswith("model name"):
            _, _, value = line.partition(":")
            model = value.strip()
        if line.startswith("processor"):
            cores += 1
    return f"{model} {cores} core"


def memory_info(path: str | os.PathLike = "/proc/meminfo") -> str:
    """Used and total memory in MB."""
    values = {}
    try:
        with open(path) as f:
            for line in f:
                key, _, rest = line.partition(":")
                fields = rest.split()
                if fields and fields[0].isdigit():
                    values[key] = int(fields[0])
    except OSError:
        return UNKNOWN
    total = values.get("MemTotal", 0)
    available = values.get("MemAvailable", 0)
    return f"{(total - available) // 1024} MB / {total // 1024} MB"


def storage_info(path: str = "/") -> str:
    """Available and total space of the root filesystem."""
    try:
        usage = shutil.disk_usage(path)
    except OSError:
        return UNKNOWN
    return f"{usage.free / GIB:.1f}G / {usage.total / GIB:.1f}G"


def bandwidth_info(root: str | os.PathLike = "/sys/class/net") -> str:
    """Link speed of the first interface that is up."""
    for name in INTERFACES:
        if read_first_line(Path(root, name, "operstate")) != "up":
            continue
        speed = read_first_line(Path(root, name, "speed"))
        try:
            mbps = int(speed or "")
        except ValueError:
            continue
        if mbps > 0:
            kind = "Wi-Fi" if name.startswith("w") else "Ethernet"
            return f"{mbps} Mbps ({kind})"
    return UNKNOWN


def ip_address() -> str:
    """
    Primary IPv4 address.

    Connecting a UDP socket sends nothing; it only makes the kernel pick
    the outgoing interface.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("192.0.2.1", 9))
            address = s.getsockname()[0]
    except OSError:
        return "127.0.0.1"
    return address or "127.0.0.1"


def local_time(now: float | None = None) -> str:
    return time.strftime("%B %d %Y, %I:%M:%S %p %Z", time.localtime(now))


def os_info(os_release: str | os.PathLike = "/etc/os-release") -> str:
    system = platform.system() or UNKNOWN
    release = platform.release()
    if system == "Windows":
        return f"Windows {release} (Build {platform.version()})"

    pretty_name = ""
    try:
        with open(os_release) as f:
            for line in f:
                if line.startswith("PRETTY_NAME="):
                    pretty_name = line.split("=", 1)[1].strip().strip('"')
                    break
    except OSError:
        pass
    if pretty_name:
        return f"{pretty_name} ({release})"
    return f"{system} {release}".strip()


def hostname() -> str:
    try:
        return socket.gethostname().lower() or "unknown"
    except OSError:
        return "unknown"


@dataclass
class SystemInfo:
    """Everything the report shows about the machine."""

    hostname: str = "unknown"
    os: str = UNKNOWN
    uptime: str = UNKNOWN
    hardware: str = UNKNOWN
    memory: str = UNKNOWN
    storage: str = UNKNOWN
    bandwidth: str = UNKNOWN
    ip: str = UNKNOWN
    local_time: str = UNKNOWN


def gather_system_info() -> SystemInfo:
    return SystemInfo(
        hostname=hostname(),
        os=os_info(),
        uptime=uptime_info(),
        hardware=cpu_info(),
        memory=memory_info(),
        storage=storage_info(),
        bandwidth=bandwidth_info(),
        ip=ip_address(),
        local_time=local_time(),
    )


#
# Settings
#


@dataclass
class FetchSettings:
    owner: str = ""
    location: str = ""
    support: str = ""
    docs: str = ""
    hide_support: bool = False
    hide_ip: bool = False
    noir: bool = False


def load_settings(
    config_dir: str | os.PathLike = CONFIG_DIR,
    overrides: dict[str, str | None] | None = None,
    **flags: bool,
) -> FetchSettings:
    """
    Read owner/location/support/docs from `config_dir`, then apply overrides.

    Missing or empty files leave the value empty. `flags` are passed
    through to FetchSettings (hide_support, hide_ip, noir).
    """
    values = {}
    for name in ("owner", "location", "support", "docs"):
        values[name] = read_first_line(Path(config_dir, name)) or ""
    for name, value in (overrides or {}).items():
        if value is not None:
            values[name] = value
    return FetchSettings(**values, **flags)


#
# Rendering
#


def looks_like_email(text: str) -> bool:
    """user@domain.tld, with no spaces before the @."""
    at = text.find("@")
    if at <= 0 or " " in text[:at]:
        return False
    dot = text.find(".", at)
    if dot == -1 or dot == at + 1:
        return False
    return dot + 1 < len(text)


def looks_like_url(text: str) -> bool:
    """Has an http(s) scheme, or a dot before any space."""
    if text.startswith(("http://", "https://")):
        return True
    if looks_like_email(text):
        return False
    dot = text.find(".")
    space = text.find(" ")
    return dot != -1 and (space == -1 or dot < space)


def hyperlink(target: str, text: str) -> str:
    """OSC 8 terminal hyperlink."""
    return f"\033]8;;{target}\a{text}\033]8;;\a"


@dataclass
class ReportWriter:
    """Builds the centred report, one line at a time."""

    term_width: int
    noir: bool = False
    lines: list[str] = field(default_factory=list)

    def _padding(self, content_width: int) -> str:
        return " " * max(0, (self.term_width - content_width) // 2)

    def _label(self, label: str) -> str:
        style = BOLD if self.noir else CYAN
        return f"{style}{label:<{LABEL_WIDTH}}{RESET}"

    def blank(self) -> None:
        self.lines.append("")

    def centered(self, text: str) -> None:
        self.lines.append(self._padding(len(text)) + text)

    def info(self, label: str, value: str) -> None:
        self.lines.append(f"{self._padding(BLOCK_WIDTH)}{self._label(label)} {value}")

    def contact(self, label: str, value: str) -> None:
        """Like info, but URLs and e-mail addresses become clickable."""
        if looks_like_email(value):
            value = hyperlink(f"mailto:{value}", value)
        elif looks_like_url(value):
            target = value if value.startswith(("http://", "https://")) else f"https://{value}"
            value = hyperlink(target, value)
        self.info(label, value)

    def text(self) -> str:
        return "".join(line + "\n" for line in self.lines)


def render_report(info: SystemInfo, settings: FetchSettings, term_width: int = 80) -> str:
    report = ReportWriter(term_width, settings.noir)

    host = info.hostname[:100]
    if settings.owner:
        report.centered(f"welcome to {host} - {settings.owner[:100]}")
    else:
        report.centered(f"welcome to {host}")
    report.blank()

    report.info("OS", info.os)
    report.info("UPTIME", info.uptime)
    report.info("HARDWARE", info.hardware)
    report.info("MEMORY", info.memory)
    report.info("STORAGE", info.storage)
    report.info("NETWORK BANDWIDTH", info.bandwidth)
    if not settings.hide_ip:
        report.info("NODE IP", info.ip)
    if settings.location:
        report.info("LOCATION", settings.location)
    report.info("LOCAL TIME", info.local_time)
    report.blank()

    if not settings.hide_support and (settings.support or settings.docs):
        if settings.support:
            report.contact("SUPPORT", settings.support)
        if settings.docs:
            report.contact("DOCS", settings.docs)
        report.blank()

    return report.text()


def tree_options(noir: bool = False, print_only: bool = False) -> SessionOptions:
    """Options of the tree above the report: roots base, printed when done."""
    if print_only:
        return SessionOptions(base=3, print_tree=True, noir=noir)
    return SessionOptions(base=3, print_tree=True, noir=noir, live=True, time_step=0.003)


def run_fetch(
    settings: FetchSettings,
    print_only: bool = False,
    display: Display | None = None,
    out: TextIO | None = None,
    info: SystemInfo | None = None,
) -> SessionResult:
    """Grow and print the tree, then print the report under it."""
    out = sys.stdout if out is None else out
    info = gather_system_info() if info is None else info
    term_width = shutil.get_terminal_size().columns

    out.write("\n")
    result = run_session(tree_options(settings.noir, print_only), display=display, out=out)
    out.write(render_report(info, settings, term_width))
    out.flush()
    return result
