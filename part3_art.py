#!/usr/bin/env python3
# part3_art.py - distro ASCII art: table, identity resolution, loading and measuring

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

from part2_escapes import Directive, Emitter, Palette, visible_width

FALLBACK = "linux"

# identity -> (accent color, art). ${cN} refers to palette slot N.
ASCII_ART: Dict[str, Tuple[int, str]] = {
    "alpine": (4, r"""
${c4}   /\ /\
  /${c7}/ ${c4}\  \
 /${c7}/   ${c4}\  \
/${c7}//    ${c4}\  \
${c7}//      ${c4}\  \
         ${c4}\
"""),
    "arch": (4, r"""
${c6}       /\
      /  \
     /\   \
${c4}    /      \
   /   ,,   \
  /   |  |  -\
 /_-''    ''-_\
"""),
    "artix": (6, r"""
${c6}      /\
     /  \
    /`'.,\
   /     ',
  /      ,`\
 /   ,.'`.  \
/.,'`     `'.\
"""),
    "debian": (1, r"""
${c1}  _____
 /  __ \
|  /    |
|  \___-
-_
  --_
"""),
    "elementary": (6, r"""
${c7}  _______
 / ____  \
/  |  /  /\
|__\ /  / |
\   /__/  /
 \_______/
"""),
    "endeavouros": (5, r"""
${c1}      /${c4}\
${c1}    /${c4}/  \${c6}\
${c1}   /${c4}/    \ ${c6}\
${c1} / ${c4}/     _) ${c6})
${c1}/_${c4}/___-- ${c6}__-
${c6} /____--
"""),
    "fedora": (4, r"""
${c7}      _____
     /   __)${c4}\${c7}
     |  /  ${c4}\ \${c7}
  ${c4}__${c7}_|  |_${c4}_/ /${c7}
 ${c4}/ ${c7}(_    _)${c4}_/${c7}
${c4}/ /${c7}  |  |
${c4}\ \${c7}__/  |
 ${c4}\${c7}(_____/
"""),
    "gentoo": (5, r"""
${c5} _-----_
(       \
\    0   \
${c7} \        )
 /      _/
(     _-
\____-
"""),
    "linuxmint": (2, r"""
${c2} ___________
|_          \
  | ${c7}| _____ ${c2}|
  | ${c7}| | | | ${c2}|
  | ${c7}| | | | ${c2}|
  | ${c7}\_____/ ${c2}|
  \_________/
"""),
    "manjaro": (2, r"""
${c2}||||||||| ||||
||||||||| ||||
||||      ||||
|||| |||| ||||
|||| |||| ||||
|||| |||| ||||
|||| |||| ||||
"""),
    "nixos": (4, r"""
${c4}  \  \ //
 ==\__\/ //
   //   \//
==//     //==
 //\___//
// /\  \==
  // \  \
"""),
    "opensuse": (2, r"""
${c2}  _______
__|   __ \
     / .\ \
     \__/ |
   _______|
   \_______
__________/
"""),
    "pop": (6, r"""
${c7}______
\   _ \        __
 \ \ \ \      / /
  \ \_\ \    / /
   \  ___\  /_/
    \ \    _
   __\_\__(_)_
  (___________)
"""),
    "ubuntu": (3, r"""
${c3}         _
     ---(_)
 _/  ---  \
(_) |   |
  \  --- _/
     ---(_)
"""),
    "void": (2, r"""
${c2}    _______
 _ \______ -
| \  ___  \ |
| | /   \ | |
| | \___/ | |
| \______ \_|
 -_______\
"""),
    "linux": (4, r"""
${c4}    ___
   (${c7}.. ${c4}|
   (${c5}<> ${c4}|
  / ${c7}__  ${c4}\
 ( ${c7}/  \ ${c4}/|
${c5}_${c4}/\ ${c7}__)${c4}/${c5}_${c4})
${c5}\/${c4}-____${c5}\/
"""),
}


def measure(text: str) -> Tuple[int, int]:
    """Return (width, height) of text in terminal cells, ignoring escape sequences."""
    lines = text.splitlines()
    width = max((visible_width(line) for line in lines), default=0)
    return width, len(lines)


def match_identity(name: Optional[str]) -> Optional[str]:
    """Map a distro name/ID onto an ASCII_ART key (exact, then prefix match)."""
    if not name:
        return None
    key = name.strip().lower().replace(" ", "")
    if key in ASCII_ART:
        return key
    for known in ASCII_ART:
        if known != FALLBACK and key.startswith(known):
            return known
    return None


def _candidates(override: Optional[str], env_override: Optional[str],
                os_release: Mapping[str, str]) -> Iterable[Optional[str]]:
    yield override
    yield env_override
    yield os_release.get("ID")
    yield from os_release.get("ID_LIKE", "").split()
    yield os_release.get("NAME", "").split(" ", 1)[0]


def resolve_identity(override: Optional[str] = None, env_override: Optional[str] = None,
                     os_release: Optional[Mapping[str, str]] = None) -> str:
    """explicit argument > PF_ASCII > detected OS (ID, ID_LIKE, NAME) > generic."""
    for name in _candidates(override, env_override, os_release or {}):
        identity = match_identity(name)
        if identity:
            return identity
    return FALLBACK


@dataclass(frozen=True)
class GlyphBlock:
    identity: str
    accent: int
    text: str
    width: int
    height: int

    def display(self, emitter: Emitter) -> None:
        """Print the art in bold, then move the cursor back up to its first row."""
        emitter.emit(Directive.SGR, 1)
        for line in self.text.splitlines():
            emitter.write(line + "\n")
        emitter.emit(Directive.SGR, 0)
        emitter.emit(Directive.CUU, self.height)


def load(identity_hint: Optional[str], palette: Palette) -> GlyphBlock:
    identity = match_identity(identity_hint) or FALLBACK
    accent, template = ASCII_ART[identity]
    text = palette.substitute(template.strip("\n"))
    width, height = measure(text)
    return GlyphBlock(identity=identity, accent=accent, text=text, width=width, height=height)
