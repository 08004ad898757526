import io
import unittest

import part3_art
from part2_escapes import Emitter, Palette
from part3_art import GlyphBlock, load, match_identity, measure, resolve_identity

from terminal_sim import cursor_row


class TestMeasure(unittest.TestCase):
    def test_escape_codes_are_not_counted(self):
        self.assertEqual(measure("\x1b[31mAB\nC"), (2, 2))

    def test_empty(self):
        self.assertEqual(measure(""), (0, 0))

    def test_widest_line_wins(self):
        self.assertEqual(measure("a\n\x1b[1m\x1b[34mabcdef\x1b[0m\nabc"), (6, 3))


class TestIdentity(unittest.TestCase):
    def test_match_identity(self):
        self.assertEqual(match_identity("Arch"), "arch")
        self.assertEqual(match_identity("opensuse-tumbleweed"), "opensuse")
        self.assertEqual(match_identity("Linux Mint"), "linuxmint")
        self.assertIsNone(match_identity("plan9"))
        self.assertIsNone(match_identity(""))

    def test_priority(self):
        release = {"ID": "ubuntu", "ID_LIKE": "debian", "NAME": "Ubuntu"}
        self.assertEqual(resolve_identity("gentoo", "void", release), "gentoo")
        self.assertEqual(resolve_identity(None, "void", release), "void")
        self.assertEqual(resolve_identity(None, None, release), "ubuntu")

    def test_id_like_then_name_then_fallback(self):
        self.assertEqual(resolve_identity(os_release={"ID": "kubuntu-ish", "ID_LIKE": "ubuntu debian"}), "ubuntu")
        self.assertEqual(resolve_identity(os_release={"ID": "x", "NAME": "Fedora Linux"}), "fedora")
        self.assertEqual(resolve_identity(os_release={}), part3_art.FALLBACK)

    def test_unknown_override_falls_through(self):
        self.assertEqual(resolve_identity("plan9", None, {"ID": "alpine"}), "alpine")


class TestLoad(unittest.TestCase):
    def test_every_art_loads(self):
        palette = Palette(Emitter(io.StringIO(), color=False))
        for name in part3_art.ASCII_ART:
            art = load(name, palette)
            self.assertEqual(art.identity, name)
            self.assertGreater(art.width, 0)
            self.assertGreater(art.height, 0)
            self.assertNotIn("${c", art.text)

    def test_width_ignores_color(self):
        plain = load("arch", Palette(Emitter(io.StringIO(), color=False)))
        colored = load("arch", Palette(Emitter(io.StringIO(), color=True)))
        self.assertEqual((plain.width, plain.height), (colored.width, colored.height))
        self.assertIn("\x1b[36m", colored.text)

    def test_unknown_hint_uses_fallback(self):
        art = load("plan9", Palette(Emitter(io.StringIO(), color=False)))
        self.assertEqual(art.identity, part3_art.FALLBACK)

    def test_display_returns_cursor_to_top(self):
        out = io.StringIO()
        block = GlyphBlock(identity="test", accent=4, text="ab\ncd\nef", width=2, height=3)
        block.display(Emitter(out))
        value = out.getvalue()
        self.assertTrue(value.startswith("\x1b[1m"))
        self.assertTrue(value.endswith("\x1b[0m\x1b[3A"))
        self.assertEqual(cursor_row(value), 0)


if __name__ == "__main__":
    unittest.main()
