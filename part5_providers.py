#!/usr/bin/env python3
# part5_providers.py - info providers and the registry that selects them

import os
import getpass
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from part0_platform import (
    ARCH,
    MEMINFO_PATH,
    UPTIME_PATH,
    _run,
    hostname,
    kernel_release,
    read_meminfo,
    read_os_release,
    read_uptime_seconds,
    running_processes,
)
from part1_bootstrap import Config, UserOverrides, debug, log
from part2_escapes import Directive, Emitter, Palette
from part4_render import InfoLine


# =============================================================================
# Pure derivations
# =============================================================================

def format_uptime(seconds: int) -> str:
    """90061 -> '1d 1h 1m ', 45 -> '0m'. Zero components are omitted."""
    days = seconds // 86400
    hours = seconds // 3600 % 24
    minutes = seconds // 60 % 60
    out = ""
    if days:
        out += f"{days}d "
    if hours:
        out += f"{hours}h "
    if minutes:
        out += f"{minutes}m "
    return out or "0m"


def memory_usage(meminfo: Mapping[str, int]) -> Optional[Tuple[int, int]]:
    """Return (used_MB, total_MB) from /proc/meminfo values in kB."""
    total = meminfo.get("MemTotal")
    if not total:
        return None
    if "MemAvailable" in meminfo:
        used = total - meminfo["MemAvailable"]
    else:
        used = total + meminfo.get("Shmem", 0)
        for key in ("MemFree", "Buffers", "Cached", "SReclaimable"):
            used -= meminfo.get(key, 0)
    return used // 1024, total // 1024


# =============================================================================
# Provider capability
# =============================================================================

def normalize_lines(label: str, result: object) -> List[InfoLine]:
    """
    Coerce a produce() result to a list of lines: None or empty -> [],
    str -> one line under label, InfoLine -> [line], iterable -> its InfoLines.
    Values are passed through str(); anything else is logged and dropped.
    """
    if result is None:
        return []
    if isinstance(result, str):
        return [InfoLine(label, result)] if result else []
    if isinstance(result, InfoLine):
        items = [result]
    else:
        try:
            items = list(result)
        except TypeError:
            log(f"[provider] {label}: unusable result {type(result).__name__}")
            return []
    lines = []
    for item in items:
        if not isinstance(item, InfoLine):
            log(f"[provider] {label}: dropped {type(item).__name__} item")
            continue
        value = "" if item.value is None else str(item.value)
        if value:
            lines.append(InfoLine(str(item.label), value, bool(item.suppress_separator)))
    return lines



class Provider(ABC):
    """
    One displayable fact. produce() returns the lines to render; an empty
    list means the data is unavailable and nothing is shown.
    """
    label = ""

    @property
    def labels(self) -> Tuple[str, ...]:
        return (self.label,)

    @abstractmethod
    def produce(self) -> List[InfoLine]:
        ...

    def line(self, value: Optional[str], label: Optional[str] = None,
             suppress_separator: bool = False) -> List[InfoLine]:
        if not value:
            return []
        return [InfoLine(label or self.label, value, suppress_separator)]


class FunctionProvider(Provider):
    """Adapts a plain callable (e.g. from PF_SOURCE) to the provider capability."""

    def __init__(self, label: str, func: Callable[[], object]):
        self.label = label
        self.func = func

    def produce(self) -> List[InfoLine]:
        return normalize_lines(self.label, self.func())


class EnvProvider(Provider):
    """First set variable out of keys, optionally reduced to its basename."""

    def __init__(self, label: str, keys: Sequence[str], env: Mapping[str, str], basename: bool = False):
        self.label = label
        self.keys = tuple(keys)
        self.env = env
        self.basename = basename

    def produce(self) -> List[InfoLine]:
        for key in self.keys:
            value = self.env.get(key, "").strip()
            if value:
                return self.line(os.path.basename(value.rstrip("/")) if self.basename else value)
        return []


class TitleProvider(Provider):
    label = "title"

    def __init__(self, env: Mapping[str, str], palette: Palette, emitter: Emitter, title_color: int = 1):
        self.env = env
        self.palette = palette
        self.color = emitter.seq(Directive.SGR, f"3{title_color}")

    def _user(self) -> str:
        user = self.env.get("USER", "")
        if not user:
            try:
                user = getpass.getuser()
            except (KeyError, OSError):
                user = ""
        return user

    def produce(self) -> List[InfoLine]:
        user = self._user()
        host = self.env.get("HOSTNAME") or hostname()
        if not user and not host:
            return []
        title = f"{self.color}{user}{self.palette['c7']}@{self.color}{host}"
        return self.line(" ", label=title, suppress_separator=True)


class OsProvider(Provider):
    label = "os"
    url_label = "url"

    def __init__(self, read: Callable[[], Mapping[str, str]] = read_os_release):
        self.read = read

    @property
    def labels(self) -> Tuple[str, ...]:
        return (self.label, self.url_label)

    def produce(self) -> List[InfoLine]:
        release = self.read()
        distro = release.get("PRETTY_NAME") or release.get("NAME", "")
        build = release.get("BUILD_ID", "")
        if distro and build and build not in distro:
            distro = f"{distro} {build}"
        lines = self.line(distro)
        if lines:
            lines += self.line(release.get("HOME_URL"), label=self.url_label)
        return lines


class KernelProvider(Provider):
    label = "kernel"

    def produce(self) -> List[InfoLine]:
        return self.line(kernel_release())


class HostProvider(Provider):
    label = "host"

    def produce(self) -> List[InfoLine]:
        return self.line(hostname() or ARCH)


class UptimeProvider(Provider):
    label = "uptime"

    def __init__(self, path: str = UPTIME_PATH):
        self.path = path

    def produce(self) -> List[InfoLine]:
        seconds = read_uptime_seconds(self.path)
        if seconds is None:
            return []
        return self.line(format_uptime(seconds))


class MemoryProvider(Provider):
    label = "memory"

    def __init__(self, path: str = MEMINFO_PATH):
        self.path = path

    def produce(self) -> List[InfoLine]:
        usage = memory_usage(read_meminfo(self.path))
        if usage is None:
            return []
        used, total = usage
        return self.line(f"{used}M / {total}M")


# ---------------- Package count ----------------

@dataclass
class PackageManager:
    probe: str          # executable that must be on PATH
    cmd: List[str]
    skip: int = 0       # header lines


PACKAGE_MANAGERS: List[PackageManager] = [
    PackageManager("kiss", ["kiss", "l"]),
    PackageManager("pacman-key", ["pacman", "-Qq"]),
    PackageManager("dpkg", ["dpkg-query", "-f", ".\n", "-W"]),
    PackageManager("xbps-query", ["xbps-query", "-l"]),
    PackageManager("apk", ["apk", "info"]),
    PackageManager("rpm", ["rpm", "-qa"]),
    PackageManager("guix", ["guix", "package", "--list-installed"]),
    PackageManager("opkg", ["opkg", "list-installed"]),
    PackageManager("nix-store", ["nix-store", "-q", "--requisites", "/run/current-system/sw"]),
    PackageManager("flatpak", ["flatpak", "list"]),
    PackageManager("snap", ["snap", "list"], skip=1),
]

PORTAGE_DB = "/var/db/pkg"


def count_portage(db: str = PORTAGE_DB) -> int:
    total = 0
    try:
        categories = os.listdir(db)
    except OSError:
        return 0
    for cat in categories:
        try:
            total += len(os.listdir(os.path.join(db, cat)))
        except OSError:
            continue
    return total


class PkgsProvider(Provider):
    label = "pkgs"

    def __init__(self, min_count: int = 2, managers: Iterable[PackageManager] = PACKAGE_MANAGERS,
                 which: Callable[[str], Optional[str]] = shutil.which,
                 runner: Callable[[List[str]], Tuple[int, str]] = _run,
                 portage: Callable[[], int] = count_portage):
        self.min_count = min_count
        self.managers = list(managers)
        self.which = which
        self.runner = runner
        self.portage = portage

    def count(self) -> int:
        total = 0
        for pm in self.managers:
            if not self.which(pm.probe):
                continue
            rc, out = self.runner(pm.cmd)
            if rc != 0:
                log(f"[pkgs] {' '.join(pm.cmd)} -> rc={rc}")
                continue
            lines = [line for line in out.splitlines() if line.strip()]
            total += max(0, len(lines) - pm.skip)
        return total + self.portage()

    def produce(self) -> List[InfoLine]:
        packages = self.count()
        # below min_count (default 2) nothing is shown
        if packages < self.min_count:
            debug(f"[pkgs] count {packages} below {self.min_count}; hidden")
            return []
        return self.line(str(packages))


# ---------------- Window manager ----------------

WM_NAMES = (
    "sway", "Hyprland", "river", "wayfire", "labwc", "weston", "kwin_wayland",
    "kwin_x11", "kwin", "mutter", "gnome-shell", "xfwm4", "openbox", "fluxbox",
    "i3", "bspwm", "dwm", "awesome", "herbstluftwm", "qtile", "xmonad", "icewm",
    "marco", "muffin", "metacity", "compiz", "enlightenment", "spectrwm", "2bwm",
    "berry", "sowm", "catwm", "evilwm", "fvwm", "jwm", "cwm", "pekwm", "wmaker",
)


def match_wm(processes: Iterable[str], names: Sequence[str] = WM_NAMES) -> str:
    running = {p.lower() for p in processes}
    for name in names:
        if name.lower() in running:
            return name
    return ""


def parse_xprop_wm_name(out: str) -> str:
    # _NET_WM_NAME = "i3"
    for line in out.splitlines():
        if line.startswith("_NET_WM_NAME") and "=" in line:
            return line.split("=", 1)[1].strip().strip('"')
    return ""


class WmProvider(Provider):
    label = "wm"

    def __init__(self, env: Mapping[str, str],
                 runner: Callable[[List[str]], Tuple[int, str]] = _run,
                 which: Callable[[str], Optional[str]] = shutil.which,
                 processes: Callable[[], List[str]] = running_processes):
        self.env = env
        self.runner = runner
        self.which = which
        self.processes = processes

    def _xprop(self) -> str:
        rc, out = self.runner(["xprop", "-root", "-notype", "_NET_SUPPORTING_WM_CHECK"])
        if rc != 0 or not out:
            return ""
        wm_id = out.split()[-1]
        rc, out = self.runner(["xprop", "-id", wm_id, "-notype", "-len", "100", "-f", "_NET_WM_NAME", "8t"])
        if rc != 0:
            return ""
        return parse_xprop_wm_name(out)

    def produce(self) -> List[InfoLine]:
        wayland = self.env.get("WAYLAND_DISPLAY")
        x11 = self.env.get("DISPLAY")
        if not wayland and not x11:
            return []
        wm = ""
        if x11 and not wayland and self.which("xprop"):
            wm = self._xprop()
        if not wm:
            wm = match_wm(self.processes())
        return self.line(wm)


class PaletteProvider(Provider):
    label = "palette"

    def __init__(self, emitter: Emitter):
        self.emitter = emitter

    def produce(self) -> List[InfoLine]:
        if not self.emitter.color:
            return []
        blocks = "".join(self.emitter.seq(Directive.SGR, f"4{n}") + "   " for n in range(1, 8))
        return self.line(" ", label=blocks + self.emitter.seq(Directive.SGR, 0), suppress_separator=True)


# =============================================================================
# Registry
# =============================================================================

def as_provider(name: str, value: object) -> Provider:
    if isinstance(value, Provider):
        return value
    if callable(value):
        return FunctionProvider(name, value)
    raise TypeError(f"provider {name!r} must be a Provider or callable, got {type(value).__name__}")


class ProviderRegistry:
    """Identifier -> provider, iterated in the order of a selection list."""

    def __init__(self) -> None:
        self._providers: Dict[str, Provider] = {}
        self._frozen = False

    def register(self, name: str, provider: Provider) -> None:
        if self._frozen:
            raise RuntimeError(f"registry is frozen; cannot register {name!r}")
        self._providers[name] = provider
        debug(f"[registry] {name} -> {type(provider).__name__}")

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Optional[Provider]:
        return self._providers.get(name)

    def known(self) -> List[str]:
        return list(self._providers)

    def __contains__(self, name: str) -> bool:
        return name in self._providers

    def extend(self, overrides: UserOverrides) -> None:
        """Merge a user override table; bad entries are logged and skipped."""
        for name, value in overrides.providers.items():
            try:
                self.register(name, as_provider(name, value))
            except TypeError as e:
                log(f"[overrides] {e}")
        if overrides.register is not None:
            try:
                overrides.register(self)
            except Exception as e:
                log(f"[overrides] register() failed: {e!r}")

    def resolve(self, selection: Iterable[str]) -> List[Tuple[str, Provider]]:
        """Selected providers in order; unknown identifiers are skipped."""
        chosen = []
        for name in selection:
            provider = self._providers.get(name)
            if provider is None:
                debug(f"[registry] unknown provider {name!r} skipped")
                continue
            chosen.append((name, provider))
        return chosen

    def label_width(self, selection: Iterable[str]) -> int:
        widths = [len(label) for _, p in self.resolve(selection) for label in p.labels]
        return max(widths, default=0) + 1

    def produce(self, name: str, provider: Provider) -> List[InfoLine]:
        try:
            result = provider.produce()
        except Exception as e:
            log(f"[provider] {name} failed: {e!r}")
            return []
        return normalize_lines(provider.label or name, result)


def builtin_registry(config: Config, emitter: Emitter, palette: Palette,
                     env: Optional[Mapping[str, str]] = None) -> ProviderRegistry:
    env = os.environ if env is None else env
    registry = ProviderRegistry()
    registry.register("title", TitleProvider(env, palette, emitter, config.col3))
    registry.register("os", OsProvider())
    registry.register("host", HostProvider())
    registry.register("kernel", KernelProvider())
    registry.register("uptime", UptimeProvider())
    registry.register("pkgs", PkgsProvider(config.pkgs_min))
    registry.register("memory", MemoryProvider())
    registry.register("wm", WmProvider(env))
    registry.register("de", EnvProvider("de", ("XDG_CURRENT_DESKTOP", "DESKTOP_SESSION"), env))
    registry.register("shell", EnvProvider("shell", ("SHELL",), env, basename=True))
    registry.register("editor", EnvProvider("editor", ("VISUAL", "EDITOR"), env, basename=True))
    registry.register("palette", PaletteProvider(emitter))
    return registry
