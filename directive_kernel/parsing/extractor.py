"""
Directive Extractor — finds [ACTION: ...] blocks in assistant text.

Pure functions. Bodies are returned untouched; validating them is left to the
tokenizer and dispatcher.
"""

import re
from typing import List

# A body never spans another bracket, so an unclosed "[ACTION:" yields nothing
# and adjacent directives are never merged.
ACTION_PATTERN = re.compile(r"\[ACTION:(?P<body>[^\[\]]*?)\]")

# One removal site: a run of directives plus the blanks hugging it
_SITE_PATTERN = re.compile(r"[ \t]*(?:\[ACTION:[^\[\]]*?\][ \t]*)+")


def extract_directives(text: str) -> List[str]:
    """Return the raw body of every directive in `text`, in order."""
    if not text:
        return []
    return [m.group("body").strip() for m in ACTION_PATTERN.finditer(text)]


def _remove_sites(text: str) -> str:
    pieces = []
    last = 0
    for match in _SITE_PATTERN.finditer(text):
        start, end = match.span()
        at_line_start = start == 0 or text[start - 1] == "\n"
        at_line_end = end == len(text) or text[end] == "\n"
        pieces.append(text[last:start])
        if at_line_start and at_line_end:
            # The directive filled the whole line: drop the line too
            if end < len(text):
                end += 1
        elif not (at_line_start or at_line_end):
            pieces.append(" ")
        last = end
    pieces.append(text[last:])
    return "".join(pieces)


def strip_directives(text: str) -> str:
    """
    Return `text` with every directive removed, ready for display.

    Only the directives and the blanks around them change; everything else,
    indentation included, is kept as written.
    """
    if not text:
        return ""
    stripped = text
    # Removing a nested block can close up a new one around it
    while ACTION_PATTERN.search(stripped):
        stripped = _remove_sites(stripped)
    return stripped.strip()
