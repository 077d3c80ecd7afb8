"""Phonetic folding of road names.

Road names arrive with typos, abbreviations and mixed casing ("Main St",
"MAIN STREET N", "Boullevard"). Each name is uppercased and pushed through an
ordered table of regex substitutions loosely based on Soundex: abbreviations
are expanded, soundalike letter clusters collapse to a single symbol, and
vowels and spaces are dropped. The result is a coarse key that is useful for
comparison but not fit for display.

The table order is load-bearing. ``SCH`` must fold before ``SC`` and ``CH``,
``TIA`` before ``D`` becomes ``T``, and vowels and spaces are removed last
because the earlier rules describe phonemes inside a single word: ``GH`` in
``ENOUGH`` is an ``F`` but ``G H`` in ``GOING HOME`` is not.

The placeholders ``Ʃ`` (sh/ch sounds), ``Ʒ`` (soft g) and ``Þ`` (th) are
capital letters outside A-Z: uppercasing leaves them alone and no later rule
matches them. The table is applied until the key stops changing, so a key
normalizes to itself.

Repeated passes run after spaces are gone and can fold across words
("SAM BROWN" loses its ``MB``), so edges are also matched on a single pass
of the table.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

from ...models.domain import RoadEdge

Rule = tuple[re.Pattern[str], str]

SH_SOUND = "Ʃ"
SOFT_G = "Ʒ"
TH_SOUND = "Þ"
PLACEHOLDERS = SH_SOUND + SOFT_G + TH_SOUND


def _rule(pattern: str, replacement: str) -> Rule:
    return re.compile(pattern), replacement


ABBREVIATION_RULES: tuple[Rule, ...] = (
    _rule(r"BLVD", "BOULEVARD"),
    _rule(r" CT", " COURT"),
    _rule(r" ST\b", "STREET"),
)

CLEANUP_RULES: tuple[Rule, ...] = (
    _rule(rf"[^A-Z0-9 ,{PLACEHOLDERS}]+", ""),
)

PHONETIC_RULES: tuple[Rule, ...] = (
    _rule(r"SCH", "KK"),
    _rule(r"SC", "K"),
    _rule(r"TIA", SH_SOUND),
    _rule(r"TIO", SH_SOUND),
    _rule(r"TCH", SH_SOUND),
    _rule(r"DG", SOFT_G),
    _rule(r"D", "T"),
    _rule(r"RR+", "R"),
    _rule(r"TT+", "T"),
    _rule(r"PP+", "P"),
    _rule(r"SS+", "K"),
    _rule(r"FF+", "F"),
    _rule(r"GG+", SOFT_G),
    _rule(r"LL+", "L"),
    _rule(r"MM+", "M"),
    _rule(r"MN", "M"),
    _rule(r"NN+", "N"),
    _rule(r"BB+", "B"),
    _rule(r"VV+", "V"),
    _rule(r"ZZ+", "K"),
    _rule(r"(?:GH|PH)", "F"),
    _rule(r"\b[KGP]N", "N"),
    _rule(r"MB", "M"),
    _rule(r"CIA", SH_SOUND),
    _rule(r"CH", SH_SOUND),
    _rule(r"SIA", SH_SOUND),
    _rule(r"SIO", SH_SOUND),
    _rule(r"SH", SH_SOUND),
    _rule(r"TH", TH_SOUND),
    _rule(r"G", SOFT_G),
    _rule(r"CK", "K"),
    _rule(r"Q", "K"),
    _rule(r"[SCZ]", "K"),
    _rule(r"X", "KK"),
    _rule(r"[AEO]W", ""),
)

# Must stay last, see module docstring.
FINAL_RULES: tuple[Rule, ...] = (
    _rule(r"[AEIOUY]", ""),
    _rule(r" ", ""),
)

RULES: tuple[Rule, ...] = ABBREVIATION_RULES + CLEANUP_RULES + PHONETIC_RULES + FINAL_RULES


def apply_rules(text: str, rules: Sequence[Rule] = RULES) -> str:
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def fold(text: str, rules: Sequence[Rule] = RULES) -> str:
    """Apply ``rules`` repeatedly until the text no longer changes.

    Vowel removal can bring letters together that fold again, e.g. ``MAIN``
    becomes ``MN`` and then ``M``. Every rule that can fire after the first
    pass shortens the text, so this terminates.
    """

    folded = apply_rules(text, rules)
    while folded != text:
        text, folded = folded, apply_rules(folded, rules)
    return folded


def normalize(raw: Optional[str]) -> list[str]:
    """Fold a comma-separated list of road names into comparison keys."""

    if raw is None or not raw.strip():
        return []
    return fold(raw.upper()).split(",")


def road_key(raw: Optional[str]) -> str | None:
    """Comparison key of the road a caller asked for: its first alias."""

    names = normalize(raw)
    if not names or not names[0]:
        return None
    return names[0]


def names_match(candidates: Iterable[str], key: str) -> bool:
    """True when any candidate alias contains ``key``.

    Containment rather than equality lets "MAIN ST" match "MAIN ST N" and
    combined name/ref fields such as "MAIN ST,US 1".
    """

    return any(key in candidate for candidate in candidates)


def fold_once(raw: Optional[str]) -> list[str]:
    """Single pass of the rule table over a comma-separated list of names.

    Unlike ``normalize`` this keeps letters of neighbouring words apart, so
    "SAM BROWN RD" still contains the key of "BROWN RD".
    """

    if raw is None or not raw.strip():
        return []
    return apply_rules(raw.upper()).split(",")


def edge_aliases(edge: RoadEdge) -> list[str]:
    """Normalized names and refs of an edge, followed by their single-pass folds."""

    aliases = normalize(edge.name) + normalize(edge.street_ref) + fold_once(edge.name) + fold_once(edge.street_ref)
    return list(dict.fromkeys(aliases))


def edge_matches(edge: RoadEdge, key: str) -> bool:
    return names_match(edge_aliases(edge), key)
