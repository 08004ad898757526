#!/usr/bin/env python3
# part6_main.py - layout orchestration: art block, info column, final cursor position

import os
import signal
from contextlib import contextmanager
from typing import Mapping, Optional, TextIO

from part0_platform import read_os_release
from part1_bootstrap import Config, console, debug, load_user_overrides
from part2_escapes import Directive, Emitter, Palette
from part3_art import GlyphBlock, load, resolve_identity
from part4_render import Renderer, RenderSession
from part5_providers import ProviderRegistry, builtin_registry

_EXIT_SIGNALS = ("SIGTERM", "SIGHUP")


def _raise_exit(signum, frame):
    raise SystemExit(128 + signum)


@contextmanager
def line_wrap_disabled(emitter: Emitter):
    """
    Disable terminal line wrap for the duration of the block.
    Wrap is re-enabled however the block ends, including SIGTERM/SIGHUP,
    which are turned into SystemExit while the guard is held.
    """
    previous = {}
    for name in _EXIT_SIGNALS:
        sig = getattr(signal, name, None)
        if sig is None:
            continue
        try:
            previous[sig] = signal.signal(sig, _raise_exit)
        except (ValueError, OSError):
            # not the main thread
            continue
    emitter.emit(Directive.WRAP_OFF)
    try:
        yield
    finally:
        emitter.emit(Directive.WRAP_ON)
        emitter.flush()
        for sig, handler in previous.items():
            # None: the previous handler was not installed from Python
            signal.signal(sig, signal.SIG_DFL if handler is None else handler)


def fetch(config: Config, emitter: Emitter, registry: ProviderRegistry, art: GlyphBlock) -> RenderSession:
    """Draw the art, then the info column beside it, and leave the cursor below both."""
    with line_wrap_disabled(emitter):
        art.display(emitter)

        # label_width must be final before the first line is drawn
        session = RenderSession.for_art(art.width, registry.label_width(config.info), config.align)
        renderer = Renderer(
            emitter,
            session,
            sep=config.sep,
            label_color=art.accent if config.col1 is None else config.col1,
            value_color=config.col2,
        )
        for name, provider in registry.resolve(config.info):
            for line in registry.produce(name, provider):
                renderer.render_line(line)

        emitter.write("\n" * session.gap(art.height))
    debug(f"[fetch] art={art.identity} {art.width}x{art.height} info_height={session.info_height}")
    return session


def main(art_override: Optional[str] = None, env: Optional[Mapping[str, str]] = None,
         out: Optional[TextIO] = None) -> int:
    env = os.environ if env is None else env
    config = Config.from_env(env)

    emitter = Emitter(out if out is not None else console.file, color=config.color, term=config.term)
    palette = Palette(emitter)

    identity = resolve_identity(art_override, config.ascii, read_os_release())
    art = load(identity, palette)

    registry = builtin_registry(config, emitter, palette, env)
    registry.extend(load_user_overrides(config.source))
    registry.freeze()

    fetch(config, emitter, registry, art)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
