#!/usr/bin/env python3
# part2_escapes.py - terminal escape sequences (cursor moves, SGR, line wrap) + palette

import re
import sys
from enum import Enum
from fnmatch import fnmatch
from typing import Dict, Optional, TextIO

from rich.control import Control
from rich.text import Text


class Directive(str, Enum):
    CUU = "CUU"            # cursor up
    CUD = "CUD"            # cursor down
    CUF = "CUF"            # cursor forward (right)
    CUB = "CUB"            # cursor back (left)
    SGR = "SGR"            # select graphic rendition
    WRAP_OFF = "WRAP_OFF"
    WRAP_ON = "WRAP_ON"


# TERM patterns known not to support a directive
COLOR_DENY = ("dumb",)
WRAP_DENY = ("dumb", "minix*")

_DENY: Dict[Directive, tuple] = {
    Directive.SGR: COLOR_DENY,
    Directive.WRAP_OFF: WRAP_DENY,
    Directive.WRAP_ON: WRAP_DENY,
}


def visible_width(text: str) -> int:
    """Width in terminal cells with escape sequences stripped."""
    return Text.from_ansi(text).cell_len


def term_matches(term: str, patterns) -> bool:
    term = (term or "").lower()
    return any(fnmatch(term, p) for p in patterns)


class Emitter:
    """
    Turns directives into control strings.
    seq() only computes the string, emit() also writes it to the stream.
    Inapplicable directives (color off, unsupported TERM) produce "".
    """

    def __init__(self, out: Optional[TextIO] = None, color: bool = True, term: str = ""):
        self.out = out if out is not None else sys.stdout
        self.term = term
        self.color = color and not term_matches(term, COLOR_DENY)

    def supports(self, directive: Directive) -> bool:
        if directive is Directive.SGR and not self.color:
            return False
        return not term_matches(self.term, _DENY.get(directive, ()))

    def seq(self, directive, arg=None) -> str:
        directive = Directive(directive)  # ValueError on unknown kinds
        if not self.supports(directive):
            return ""
        if directive is Directive.CUU:
            return str(Control.move(y=-int(arg or 0)))
        if directive is Directive.CUD:
            return str(Control.move(y=int(arg or 0)))
        if directive is Directive.CUF:
            return str(Control.move(x=int(arg or 0)))
        if directive is Directive.CUB:
            return str(Control.move(x=-int(arg or 0)))
        if directive is Directive.SGR:
            return f"\x1b[{0 if arg is None else arg}m"
        if directive is Directive.WRAP_OFF:
            return "\x1b[?7l"
        return "\x1b[?7h"

    def emit(self, directive, arg=None) -> None:
        self.write(self.seq(directive, arg))

    def write(self, text: str) -> None:
        if text:
            self.out.write(text)

    def flush(self) -> None:
        try:
            self.out.flush()
        except (AttributeError, OSError):
            pass


# ---------------- Palette ----------------

_SLOT_RE = re.compile(r"\$\{c([0-7])\}")


class Palette:
    """Eight color slots c0..c7 (SGR 30..37), resolved once."""

    def __init__(self, emitter: Emitter):
        self.slots: Dict[str, str] = {
            f"c{n}": emitter.seq(Directive.SGR, 30 + n) for n in range(8)
        }

    def __getitem__(self, slot: str) -> str:
        return self.slots[slot]

    def substitute(self, template: str) -> str:
        return _SLOT_RE.sub(lambda m: self.slots["c" + m.group(1)], template)
