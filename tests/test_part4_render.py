import io
import unittest

from part2_escapes import Emitter
from part4_render import ART_GAP, InfoLine, Renderer, RenderSession

from terminal_sim import screen


def _renderer(color=True, ascii_width=10, label_width=7, sep=": "):
    out = io.StringIO()
    session = RenderSession(ascii_width, label_width)
    return out, session, Renderer(Emitter(out, color=color), session, sep=sep)


class TestRenderSession(unittest.TestCase):
    def test_for_art_adds_gap(self):
        session = RenderSession.for_art(20, 7)
        self.assertEqual(session.ascii_width, 20 + ART_GAP)
        self.assertEqual(session.label_width, 7)
        self.assertEqual(session.info_height, 0)

    def test_align_overrides_label_width(self):
        self.assertEqual(RenderSession.for_art(20, 7, align=15).label_width, 15)

    def test_label_width_is_fixed(self):
        session = RenderSession(10, 7)
        with self.assertRaises(AttributeError):
            session.label_width = 9

    def test_gap(self):
        session = RenderSession(10, 7)
        session.info_height = 3
        self.assertEqual(session.gap(7), 4)
        self.assertEqual(session.gap(3), 0)
        self.assertEqual(session.gap(2), 0)


class TestRenderer(unittest.TestCase):
    def test_values_align_regardless_of_label_length(self):
        for color in (True, False):
            out, session, renderer = _renderer(color=color)
            for label in ("os", "kernel", "uptime", "de"):
                renderer.render(label, "VAL")
            rows = screen(out.getvalue())
            self.assertEqual(len(rows), 4)
            columns = {row.index("VAL") for row in rows}
            # ascii_width + separator + label_width
            self.assertEqual(columns, {10 + 2 + 7})
            self.assertTrue(rows[1].startswith(" " * 10 + "kernel: "))

    def test_suppressed_separator(self):
        out, session, renderer = _renderer(color=False)
        renderer.render("title", "x", suppress_separator=True)
        row = screen(out.getvalue())[0]
        self.assertNotIn(":", row)
        self.assertEqual(row.index("x"), 10 + 7)

    def test_escape_codes_in_label_do_not_shift_value(self):
        out, session, renderer = _renderer()
        renderer.render("\x1b[31mme\x1b[37m@\x1b[31mbox", "V", suppress_separator=True)
        renderer.render("os", "V", suppress_separator=True)
        rows = screen(out.getvalue())
        self.assertEqual(rows[0].index("V"), rows[1].index("V"))
        self.assertEqual(rows[0].strip(), "me@box V")

    def test_empty_value_is_skipped(self):
        out, session, renderer = _renderer()
        self.assertFalse(renderer.render("memory", ""))
        self.assertEqual(out.getvalue(), "")
        self.assertEqual(session.info_height, 0)

    def test_info_height_counts_lines(self):
        out, session, renderer = _renderer()
        self.assertTrue(renderer.render_line(InfoLine("os", "Void")))
        renderer.render_line(InfoLine("kernel", ""))
        renderer.render_line(InfoLine("uptime", "1h "))
        self.assertEqual(session.info_height, 2)
        self.assertEqual(out.getvalue().count("\n"), 2)

    def test_colors(self):
        out, session, renderer = _renderer()
        renderer.label_color = 5
        renderer.value_color = 2
        renderer.render("os", "Void")
        value = out.getvalue()
        self.assertIn("\x1b[35m\x1b[1mos\x1b[0m: ", value)
        self.assertIn("\x1b[32mVoid\x1b[0m\n", value)

    def test_custom_separator(self):
        out, session, renderer = _renderer(color=False, sep=" ~ ")
        renderer.render("os", "VAL")
        row = screen(out.getvalue())[0]
        self.assertEqual(row.index("VAL"), 10 + 3 + 7)
        self.assertIn("os ~", row)


if __name__ == "__main__":
    unittest.main()
