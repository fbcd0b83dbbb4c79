"""Slug generation for taxonomy nodes.

Slugs are URL-safe identifiers derived from display names. Latin names are
normalized directly; Cyrillic names are transliterated first.

Example:
    slugify("Home & Garden")  -> "home-garden"
    slugify("Електроніка")   -> "elektronika"
"""

import re

# Ukrainian and Russian letters plus apostrophes, lower case only.
TRANSLIT_TABLE: dict[str, str] = {
    "а": "a",
    "б": "b",
    "в": "v",
    "г": "h",
    "ґ": "g",
    "д": "d",
    "е": "e",
    "є": "ye",
    "ё": "yo",
    "ж": "zh",
    "з": "z",
    "и": "y",
    "і": "i",
    "ї": "yi",
    "й": "y",
    "к": "k",
    "л": "l",
    "м": "m",
    "н": "n",
    "о": "o",
    "п": "p",
    "р": "r",
    "с": "s",
    "т": "t",
    "у": "u",
    "ф": "f",
    "х": "kh",
    "ц": "ts",
    "ч": "ch",
    "ш": "sh",
    "щ": "shch",
    "ъ": "",
    "ы": "y",
    "ь": "",
    "э": "e",
    "ю": "yu",
    "я": "ya",
    "'": "",
    "’": "",
    "ʼ": "",
}

CYRILLIC_LETTERS = "".join(ch for ch in TRANSLIT_TABLE if "Ѐ" <= ch <= "ӿ")

_NOT_LATIN_OR_CYRILLIC = re.compile(rf"[^a-z0-9\s_\-{CYRILLIC_LETTERS}]")
_NOT_LATIN = re.compile(r"[^a-z0-9\s_\-]")
_SEPARATORS = re.compile(r"[\s_\-]+")
_CYRILLIC = re.compile(rf"[{CYRILLIC_LETTERS}]")


def _normalize(text: str, disallowed: re.Pattern[str]) -> str:
    text = disallowed.sub("", text)
    text = _SEPARATORS.sub("-", text)
    return text.strip("-")


def transliterate(text: str) -> str:
    """Replace each mapped character with its Latin sequence.

    Args:
        text: Lower-cased text.

    Returns:
        Text with table characters replaced, others left as they are.
    """
    return "".join(TRANSLIT_TABLE.get(ch, ch) for ch in text)


def slugify(name: str) -> str:
    """Derive a URL-safe slug from a display name.

    The result only contains ``[a-z0-9-]`` and may be empty when the name
    has no Latin, digit or transliterable characters. Collisions are not
    resolved here.

    Args:
        name: Display name, any Unicode.

    Returns:
        Slug string.
    """
    lowered = name.lower()
    slug = _normalize(lowered, _NOT_LATIN_OR_CYRILLIC)
    if slug and not _CYRILLIC.search(slug):
        return slug
    return _normalize(transliterate(lowered), _NOT_LATIN)
