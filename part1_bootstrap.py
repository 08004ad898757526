#!/usr/bin/env python3
# part1_bootstrap.py - app constants, console, logging, env config, user overrides

import os
import importlib.util
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional

from rich.console import Console

APP_NAME = "SysFetch"
VERSION = "1.0.0"

DEFAULT_INFO = ["title", "os", "host", "kernel", "uptime", "pkgs", "memory"]
DEFAULT_SEP = ": "
DEFAULT_PKGS_MIN = 2  # the 1?*|[2-9]* count glob: hides 0 and 1 only, not counts under 10


# Debug flag
def _is_debugging() -> bool:
    return os.environ.get("SYSFETCH_DEBUG") == "1"


DEBUG = _is_debugging()

console = Console()


# Logging paths
def _safe_log_dir() -> str:
    xdg = os.environ.get("XDG_DATA_HOME") or os.path.expanduser(os.path.join("~", ".local", "share"))
    pd_dir = os.path.join(xdg, APP_NAME)
    try:
        os.makedirs(pd_dir, exist_ok=True)
    except OSError:
        pd_dir = tempfile.gettempdir()
    return pd_dir


LOG_DIR = _safe_log_dir()
LOG_FILE = os.path.join(LOG_DIR, "sysfetch.log")


def log(msg: str) -> None:
    try:
        line = f"{datetime.now():%Y-%m-%d %H:%M:%S} | {msg}"
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError:
        pass


def debug(msg: str) -> None:
    if DEBUG:
        log(f"[debug] {msg}")


def tail_log(n: int = 200) -> str:
    try:
        with open(LOG_FILE, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
            return "\n".join(lines[-n:])
    except OSError:
        return ""


# ---------------- Configuration ----------------

def _int_env(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log(f"[config] ignoring non-numeric {key}={raw!r}")
        return default


@dataclass
class Config:
    """Runtime settings, read once from PF_* environment variables."""
    color: bool = True
    ascii: str = ""
    info: List[str] = field(default_factory=lambda: list(DEFAULT_INFO))
    sep: str = DEFAULT_SEP
    col1: Optional[int] = None   # labels; None means the art's accent color
    col2: int = 9                # values
    col3: int = 1                # title
    align: Optional[int] = None
    source: str = ""
    pkgs_min: int = DEFAULT_PKGS_MIN
    term: str = ""

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Config":
        env = os.environ if env is None else env
        return cls(
            color=env.get("PF_COLOR", "1").strip() != "0",
            ascii=env.get("PF_ASCII", "").strip(),
            info=env.get("PF_INFO", "").split() or list(DEFAULT_INFO),
            sep=env.get("PF_SEP", DEFAULT_SEP),
            col1=_int_env(env, "PF_COL1", None),
            col2=_int_env(env, "PF_COL2", 9),
            col3=_int_env(env, "PF_COL3", 1),
            align=_int_env(env, "PF_ALIGN", None),
            source=env.get("PF_SOURCE", "").strip(),
            pkgs_min=_int_env(env, "PF_PKGS_MIN", DEFAULT_PKGS_MIN),
            term=env.get("TERM", ""),
        )


# ---------------- User overrides (PF_SOURCE) ----------------

@dataclass
class UserOverrides:
    providers: Dict[str, object] = field(default_factory=dict)
    register: Optional[Callable[..., None]] = None

    def __bool__(self) -> bool:
        return bool(self.providers) or self.register is not None


def load_user_overrides(path: str) -> UserOverrides:
    """
    Load a user Python file named by PF_SOURCE.
    The file may define PROVIDERS (identifier -> provider or callable) and/or
    register(registry). Any failure is logged and yields empty overrides.
    """
    if not path:
        return UserOverrides()
    path = os.path.expanduser(path)
    if not os.path.isfile(path):
        log(f"[overrides] PF_SOURCE not found: {path}")
        return UserOverrides()
    try:
        spec = importlib.util.spec_from_file_location("sysfetch_user_overrides", path)
        if not spec or not spec.loader:
            return UserOverrides()
        mod = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(mod)  # type: ignore[attr-defined]
    except Exception as e:
        log(f"[overrides] failed to load {path}: {e!r}")
        return UserOverrides()

    overrides = UserOverrides()
    providers = getattr(mod, "PROVIDERS", None)
    if isinstance(providers, dict):
        overrides.providers = {str(k): v for k, v in providers.items()}
    elif providers is not None:
        log(f"[overrides] PROVIDERS in {path} is not a dict; ignored")
    register = getattr(mod, "register", None)
    if callable(register):
        overrides.register = register
    return overrides
