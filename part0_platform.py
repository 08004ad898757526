#!/usr/bin/env python3
# part0_platform.py - system fact readers (os-release, /proc, uname, processes)

import os
import platform
import socket
import subprocess
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

ARCH = platform.machine()

OS_RELEASE_PATHS = ("/etc/os-release", "/usr/lib/os-release")
MEMINFO_PATH = "/proc/meminfo"
UPTIME_PATH = "/proc/uptime"
PROC_DIR = "/proc"


def _run(cmd: List[str], timeout: float = 5) -> Tuple[int, str]:
    try:
        r = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8", timeout=timeout)
        return r.returncode, r.stdout.strip()
    except FileNotFoundError:
        return 127, ""
    except (OSError, subprocess.SubprocessError) as e:
        return 1, str(e)


def _read_text(path: str) -> Optional[str]:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError:
        return None


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse KEY=value lines of an os-release file, unquoting values."""
    data: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        data[key.strip()] = value.replace('\\"', '"')
    return data


def read_os_release(paths=OS_RELEASE_PATHS) -> Dict[str, str]:
    for path in paths:
        text = _read_text(path)
        if text is not None:
            return parse_os_release(text)
    return {}


def parse_meminfo(text: str) -> Dict[str, int]:
    # values are in kB; "MemTotal:  8000000 kB"
    data: Dict[str, int] = {}
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, rest = line.split(":", 1)
        parts = rest.split()
        if not parts:
            continue
        try:
            data[key.strip()] = int(parts[0])
        except ValueError:
            continue
    return data


def read_meminfo(path: str = MEMINFO_PATH) -> Dict[str, int]:
    text = _read_text(path)
    return parse_meminfo(text) if text is not None else {}


def read_uptime_seconds(path: str = UPTIME_PATH) -> Optional[int]:
    text = _read_text(path)
    if not text:
        return None
    try:
        return int(float(text.split()[0]))
    except (ValueError, IndexError):
        return None


@lru_cache(maxsize=None)
def kernel_release() -> str:
    return platform.release()


@lru_cache(maxsize=None)
def hostname() -> str:
    name = ""
    try:
        name = socket.gethostname()
    except OSError:
        pass
    return name or platform.node()


def running_processes(proc_dir: str = PROC_DIR) -> List[str]:
    """Command names of running processes, read from /proc/<pid>/comm."""
    names: List[str] = []
    try:
        entries = os.listdir(proc_dir)
    except OSError:
        return names
    for entry in entries:
        if not entry.isdigit():
            continue
        comm = _read_text(os.path.join(proc_dir, entry, "comm"))
        if comm:
            names.append(comm.strip())
    return names

