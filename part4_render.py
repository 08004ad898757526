#!/usr/bin/env python3
# part4_render.py - info lines, render session state and the line renderer

from dataclasses import dataclass
from typing import Optional

from part1_bootstrap import debug
from part2_escapes import Directive, Emitter, visible_width

ART_GAP = 4  # columns between the art and the info column


@dataclass
class InfoLine:
    label: str
    value: str
    suppress_separator: bool = False


class RenderSession:
    """
    Per-run layout state shared by the renderer and the orchestrator.
    label_width is fixed when the session is created; every value column
    aligns to it, so it cannot change once rendering starts.
    """

    __slots__ = ("ascii_width", "_label_width", "info_height")

    def __init__(self, ascii_width: int, label_width: int):
        self.ascii_width = ascii_width
        self._label_width = label_width
        self.info_height = 0

    @property
    def label_width(self) -> int:
        return self._label_width

    @classmethod
    def for_art(cls, art_width: int, label_width: int, align: Optional[int] = None) -> "RenderSession":
        return cls(art_width + ART_GAP, align if align is not None else label_width)

    def gap(self, art_height: int) -> int:
        """Newlines needed to move below the taller of the two blocks."""
        return max(0, art_height - self.info_height)


class Renderer:
    def __init__(self, emitter: Emitter, session: RenderSession, sep: str = ": ",
                 label_color: int = 4, value_color: int = 9):
        self.emitter = emitter
        self.session = session
        self.sep = sep
        self.label_color = label_color
        self.value_color = value_color

    def render(self, label: str, value: str, suppress_separator: bool = False) -> bool:
        """Print one aligned label/value line. Returns False when value is empty."""
        if not value:
            return False
        e = self.emitter
        e.emit(Directive.CUF, self.session.ascii_width)

        e.emit(Directive.SGR, f"3{self.label_color}")
        e.emit(Directive.SGR, 1)
        e.write(label)
        e.emit(Directive.SGR, 0)
        if not suppress_separator:
            e.write(self.sep)

        # re-anchor from where this label ended
        e.emit(Directive.CUB, visible_width(label))
        e.emit(Directive.CUF, self.session.label_width)

        e.emit(Directive.SGR, f"3{self.value_color}")
        e.write(value)
        e.emit(Directive.SGR, 0)
        e.write("\n")

        self.session.info_height += 1
        debug(f"[render] {visible_width(label)}-col label, height={self.session.info_height}")
        return True

    def render_line(self, line: InfoLine) -> bool:
        return self.render(line.label, line.value, line.suppress_separator)
