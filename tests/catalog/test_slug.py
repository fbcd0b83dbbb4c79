"""Tests for slug generation."""

import re

import pytest

from storeadmin.catalog.slug import TRANSLIT_TABLE, slugify, transliterate

SLUG_PATTERN = re.compile(r"^[a-z0-9-]*$")


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Electronics", "electronics"),
            ("Home & Garden", "home-garden"),
            ("  Kitchen   Dining  ", "kitchen-dining"),
            ("snake_case__name", "snake-case-name"),
            ("--Leading and trailing--", "leading-and-trailing"),
            ("USB-C Cables 2.0", "usb-c-cables-20"),
        ],
    )
    def test_latin_names(self, name: str, expected: str) -> None:
        """Latin names are lower-cased, stripped and hyphenated."""
        assert slugify(name) == expected

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Електроніка", "elektronika"),
            ("Ноутбуки", "noutbuky"),
            ("Навушники", "navushnyky"),
            ("Щастя", "shchastya"),
            ("Їжа", "yizha"),
            ("Подвір'я", "podvirya"),
            ("Съёмка", "syomka"),
        ],
    )
    def test_cyrillic_names_are_transliterated(self, name: str, expected: str) -> None:
        """Cyrillic names go through the transliteration table."""
        assert slugify(name) == expected

    def test_mixed_script_name(self) -> None:
        """Cyrillic left after the first pass triggers transliteration of the whole name."""
        assert slugify("Смартфони Apple") == "smartfony-apple"

    def test_unmapped_script_gives_empty_slug(self) -> None:
        """Names outside both alphabets produce an empty slug."""
        assert slugify("東京") == ""
        assert slugify("!!!") == ""

    @pytest.mark.parametrize(
        "name",
        ["Електроніка", "Home & Garden", "Ёлка № 5", "Crème brûlée", "Ω-3 Добавки", ""],
    )
    def test_output_alphabet(self, name: str) -> None:
        """Only lower-case ASCII letters, digits and hyphens survive."""
        assert SLUG_PATTERN.match(slugify(name))

    def test_deterministic(self) -> None:
        """The same name always gives the same slug."""
        assert slugify("Дитячі Іграшки") == slugify("Дитячі Іграшки")

    def test_every_mapped_letter_gives_non_empty_slug(self) -> None:
        """A name made only of mapped Cyrillic letters is never empty."""
        letters = [ch for ch, latin in TRANSLIT_TABLE.items() if latin and ch.isalpha()]
        for letter in letters:
            assert slugify(letter * 2) != ""
        assert slugify("".join(letters)) != ""


class TestTransliterate:
    """Tests for transliterate."""

    def test_unmapped_characters_pass_through(self) -> None:
        """Characters missing from the table are kept as they are."""
        assert transliterate("abc 123") == "abc 123"

    def test_soft_sign_and_apostrophes_removed(self) -> None:
        """Soft sign and apostrophes map to nothing."""
        assert transliterate("сіль") == "sil"
        assert transliterate("м’ята") == "myata"
