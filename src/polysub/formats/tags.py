"""Inline formatting tag scanning shared by the format converters.

Every converter is a left-to-right scan: at each position a list of rules is
tried in priority order and the first match produces output; when no rule
matches, a literal run is copied up to the next tag delimiter. Tags are never
nested: a tag runs from its opening delimiter to the first closing one.
"""

import re
from collections.abc import Callable, Mapping, Sequence

Rule = Callable[[str, int], tuple[str, int] | None]
"""Scan rule: given text and position, return (output, next position) or None."""

_DRAWING_START = re.compile(r"\\p[1-9]")
_SUBSTATION_COLOR = re.compile(r"\{\\1?c&H([0-9A-Fa-f]+)&\}")
_HTML_COLOR = re.compile(r'<font color="#([0-9A-Fa-f]+)">')


def scan(text: str, rules: Sequence[Rule], delimiters: str) -> str:
    """Rewrite text by applying rules left to right.

    Args:
        text: Input text
        rules: Rules tried in order at every position
        delimiters: Characters that may start a tag; literal runs stop before them

    Returns:
        Rewritten text
    """
    out: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        for rule in rules:
            result = rule(text, pos)
            if result is not None:
                piece, pos = result
                out.append(piece)
                break
        else:
            end = _next_delimiter(text, pos + 1, delimiters)
            out.append(text[pos:end])
            pos = end
    return "".join(out)


def _next_delimiter(text: str, start: int, delimiters: str) -> int:
    positions = [text.find(d, start) for d in delimiters]
    found = [p for p in positions if p != -1]
    return min(found) if found else len(text)


def tag_end(text: str, pos: int, opening: str, closing: str) -> int | None:
    """Return the index just past the tag starting at pos, or None."""
    if not text.startswith(opening, pos):
        return None
    end = text.find(closing, pos + 1)
    if end == -1:
        return None
    return end + 1


def replace_tags(mapping: Mapping[str, str]) -> Rule:
    """Build a rule replacing exact tag strings with their mapped values."""

    def rule(text: str, pos: int) -> tuple[str, int] | None:
        for source, target in mapping.items():
            if text.startswith(source, pos):
                return target, pos + len(source)
        return None

    return rule


def keep_tags(tags: Sequence[str]) -> Rule:
    """Build a rule copying the given tags unchanged."""
    return replace_tags({tag: tag for tag in tags})


def discard_html_tag(text: str, pos: int) -> tuple[str, int] | None:
    """Drop a ``<...>`` tag."""
    end = tag_end(text, pos, "<", ">")
    return None if end is None else ("", end)


def discard_bracket_tag(text: str, pos: int) -> tuple[str, int] | None:
    """Drop a ``{...}`` tag."""
    end = tag_end(text, pos, "{", "}")
    return None if end is None else ("", end)


def convert_hex(color: str) -> str:
    """Swap the byte order of a six digit hex colour (BBGGRR <-> RRGGBB).

    Shorter values are zero padded on the left; longer values keep their
    last six digits, which drops a leading alpha byte.
    """
    digits = color.rjust(6, "0")[-6:]
    return digits[4:6] + digits[2:4] + digits[0:2]


def substation_color_to_html(text: str, pos: int) -> tuple[str, int] | None:
    """Turn ``{\\c&HBBGGRR&}`` or ``{\\1c&HBBGGRR&}`` into a font tag."""
    match = _SUBSTATION_COLOR.match(text, pos)
    if match is None:
        return None
    return f'<font color="#{convert_hex(match.group(1))}">', match.end()


def html_color_to_substation(text: str, pos: int) -> tuple[str, int] | None:
    """Turn ``<font color="#RRGGBB">`` into a colour override.

    Named colours are not recognised and fall through to the other rules.
    """
    match = _HTML_COLOR.match(text, pos)
    if match is None:
        return None
    return f"{{\\c&H{convert_hex(match.group(1))}&}}", match.end()


def _split_override(text: str, pos: int) -> tuple[str, int] | None:
    end = tag_end(text, pos, "{", "}")
    if end is None:
        return None
    inner = text[pos + 1 : end - 1]
    if not inner.startswith("\\"):
        return None
    codes = inner.split("\\")[1:]
    return "".join(f"{{\\{code}}}" for code in codes), end


def split_override_tags(text: str) -> str:
    """Split grouped override codes, ``{\\b1\\i1}`` becomes ``{\\b1}{\\i1}``.

    Groups whose content does not start with a backslash are left untouched.
    """
    return scan(text, [_split_override], "{")


def _drawing_span_end(text: str, pos: int) -> int:
    search = pos
    while (start := text.find("{", search)) != -1:
        end = text.find("}", start + 1)
        if end == -1:
            break
        if "\\p0" in text[start + 1 : end]:
            return end + 1
        search = start + 1
    return len(text)


def discard_drawing_span(text: str, pos: int) -> tuple[str, int] | None:
    """Drop a drawing span opened by ``\\pN`` (N > 0) and closed by ``\\p0``.

    Without a closing override the span runs to the end of the text.
    """
    end = tag_end(text, pos, "{", "}")
    if end is None or not _DRAWING_START.search(text, pos + 1, end - 1):
        return None
    return "", _drawing_span_end(text, pos)


def strip_html_tags(text: str) -> str:
    """Remove every ``<...>`` tag."""
    return scan(text, [discard_html_tag], "<")


def strip_bracket_tags(text: str) -> str:
    """Remove every ``{...}`` tag."""
    return scan(text, [discard_bracket_tag], "{")


def strip_html_and_bracket_tags(text: str) -> str:
    """Remove every ``<...>`` and ``{...}`` tag."""
    return scan(text, [discard_html_tag, discard_bracket_tag], "<{")


def strip_drawing_and_bracket_tags(text: str) -> str:
    """Remove drawing spans, then every remaining override block."""
    return scan(text, [discard_drawing_span, discard_bracket_tag], "{")
