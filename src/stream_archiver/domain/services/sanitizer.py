"""Filesystem-safe name sanitization for video titles."""

from __future__ import annotations

import re
import unicodedata

_TIMESTAMP = re.compile(r"[0-9]+(?::[0-9]+)+")
# Placeholders are two characters: a NUL marker followed by the pending literal.
_DEDUP = re.compile(r"(\x00.)(?:(?=\1)..)+")
_STRIP = re.compile(r"\A\x00.(?:\x00.|[ _-])*|(?:\x00.|[ _-])*\Z")

_ACCENT_SOURCE = "ÂÃÄÀÁÅÆÇÈÉÊËÌÍÎÏÐÑÒÓÔÕÖŐØŒÙÚÛÜŰÝÞßàáâãäåæçèéêëìíîïðñòóôõöőøœùúûüűýþÿ"
_ACCENT_TARGETS = (
    "A", "A", "A", "A", "A", "A", "AE", "C", "E", "E", "E", "E", "I", "I", "I", "I", "D", "N",
    "O", "O", "O", "O", "O", "O", "O", "OE", "U", "U", "U", "U", "U", "Y", "TH", "ss", "a",
    "a", "a", "a", "a", "a", "ae", "c", "e", "e", "e", "e", "i", "i", "i", "i", "d", "n", "o",
    "o", "o", "o", "o", "o", "o", "oe", "u", "u", "u", "u", "u", "y", "th", "y",
)  # fmt: skip
ACCENTS = dict(zip(_ACCENT_SOURCE, _ACCENT_TARGETS))

# Fullwidth lookalikes for characters reserved by common filesystems
SYMBOLS = dict(zip("\"*:<>?|/\\", ("＂", "＊", "：", "＜", "＞", "？", "｜", "⧸", "⧹")))

_RESTRICTED_PUNCTUATION = "!&'()[]{}&;1^,#"
_MARK_CATEGORIES = frozenset({"Cc", "Cf", "Cs", "Co", "Mc", "Me", "Mn"})


def _is_control_or_mark(character: str) -> bool:
    return unicodedata.category(character) in _MARK_CATEGORIES


def _replace_character(character: str, restricted: bool) -> str:
    if restricted and character in ACCENTS:
        return ACCENTS[character]
    if not restricted and character == "\n":
        return "\x00 "
    if not restricted and character in SYMBOLS:
        return SYMBOLS[character]
    if character == "?" or ord(character) <= 0x1F or character == "\x7f":
        return ""
    if character == '"':
        return "" if restricted else "'"
    if character == ":":
        return "\x00_\x00-" if restricted else "\x00 \x00-"
    if character in "\\/|*<>":
        return "\x00_"
    if restricted and (character in _RESTRICTED_PUNCTUATION or character == " "):
        return "\x00_"
    if restricted and ord(character) > 0x7F:
        return "" if _is_control_or_mark(character) else "\x00_"
    return character


def sanitize(title: str, restricted: bool) -> str:
    """
    Turn a video title into a string usable as a file name.

    Restricted mode produces ASCII-only names that are safe on every common
    filesystem. Unrestricted mode keeps Unicode and swaps reserved characters
    for visually similar fullwidth glyphs.

    Args:
        title: Raw title
        restricted: Whether to apply the ASCII-only rules

    Returns:
        A non-empty file name fragment
    """
    data = unicodedata.normalize("NFKC", title) if restricted else title
    data = _TIMESTAMP.sub(lambda m: m.group(0).replace(":", "_"), data)
    data = "".join(_replace_character(c, restricted) for c in data)

    data = _DEDUP.sub(r"\1", data)
    data = _STRIP.sub("", data)
    data = data.replace("\x00", "")

    while "__" in data:
        data = data.replace("__", "_")
    data = data.strip("_")

    if restricted and data.startswith("-_"):
        data = data[2:]
    if data.startswith("-"):
        data = f"_{data[1:]}"
    data = data.lstrip(".")

    return data or "_"
