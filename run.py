#!/usr/bin/env python3
# run.py - entrypoint for SysFetch

import argparse
import os
import sys

try:
    import part0_platform
    import part1_bootstrap
    import part2_escapes
    import part3_art
    import part4_render
    import part5_providers
    import part6_main
except ImportError as e:
    print(f"[FATAL] Missing module: {e}. Ensure all partX files exist.")
    sys.exit(1)

from rich.table import Table

from part1_bootstrap import APP_NAME, VERSION, Config, console, load_user_overrides
from part2_escapes import Emitter, Palette


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sysfetch", description=f"{APP_NAME} {VERSION} - system information beside distro art")
    parser.add_argument("ascii", nargs="?", default=None, help="Art to show instead of the detected distro's")
    parser.add_argument("-v", "--version", action="store_true", help="Show version")
    parser.add_argument("-l", "--list", action="store_true", help="List known providers and art, then exit")
    return parser


def _list_providers() -> None:
    config = Config.from_env()
    emitter = Emitter(console.file, color=False)
    registry = part5_providers.builtin_registry(config, emitter, Palette(emitter))
    registry.extend(load_user_overrides(config.source))

    table = Table(title=f"{APP_NAME} providers")
    table.add_column("Name", style="bold")
    table.add_column("Labels")
    table.add_column("Selected", justify="center")
    for name in registry.known():
        provider = registry.get(name)
        table.add_row(name, ", ".join(provider.labels), "yes" if name in config.info else "")
    console.print(table)
    console.print("[grey50]Art: " + ", ".join(sorted(part3_art.ASCII_ART)) + "[/]")


def main(argv=None) -> int:
    args = _parser().parse_args(argv)
    if args.version:
        console.print(f"{APP_NAME} {VERSION}")
        return 0
    if args.list:
        _list_providers()
        return 0
    return part6_main.main(art_override=args.ascii, env=os.environ)


if __name__ == "__main__":
    sys.exit(main())
