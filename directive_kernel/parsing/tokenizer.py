"""Param Tokenizer — turns a directive body into a Directive."""

from typing import Dict

from directive_kernel.errors import ParseError
from directive_kernel.models.directive import Directive


def tokenize(body: str) -> Directive:
    """
    Parse `TYPE | key1: value1 | key2: value2 ...`.

    Values are split on the first colon only, so times like 14:30 survive.
    Segments without a colon are discarded, and the first occurrence of a
    repeated key wins. Unknown types are passed through for the dispatcher
    to reject.
    """
    segments = [s.strip() for s in (body or "").split("|")]
    segments = [s for s in segments if s]
    if not segments:
        raise ParseError("Directive has no type")

    directive_type, rest = segments[0], segments[1:]

    params: Dict[str, str] = {}
    for segment in rest:
        key, sep, value = segment.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        if key not in params:
            params[key] = value.strip()

    if not params:
        raise ParseError(f"Directive {directive_type} has no key:value params")

    return Directive(type=directive_type, raw_params=body.strip(), params=params)
