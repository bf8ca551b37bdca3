"""Extraction of predicate arguments from their raw AST shapes."""

from __future__ import annotations

import re
from numbers import Number
from typing import Any, Optional

from schemagraph.core.constraints.predicates import Span

_LITERAL_TAGS = frozenset({"value", "val", "literal", "class", "left", "right"})
_PATTERN_TAGS = frozenset({"regexp", "regex"})


def extract_numeric(arg: Any) -> Optional[Number]:
    """Return ``5`` for ``5`` or ``("num", 5)``; None otherwise."""
    if isinstance(arg, bool):
        return None
    if isinstance(arg, Number):
        return arg
    if _tagged(arg, "num") and len(arg) == 2:
        return extract_numeric(arg[1])
    return None


def extract_list(arg: Any) -> Optional[list]:
    if _tagged(arg, "list") or _tagged(arg, "set"):
        return extract_list(arg[1]) if len(arg) == 2 else None
    if isinstance(arg, (list, tuple)):
        return list(arg)
    if isinstance(arg, (set, frozenset)):
        return sorted(arg, key=repr)
    return None


def extract_literal(arg: Any) -> Any:
    if not isinstance(arg, (list, tuple)):
        return arg
    if len(arg) == 2 and isinstance(arg[0], str) and arg[0] in _LITERAL_TAGS:
        return arg[1]
    if arg and isinstance(arg[0], (list, tuple)):
        return extract_literal(arg[0])
    return arg


def extract_pattern(arg: Any) -> Optional[str]:
    if isinstance(arg, re.Pattern):
        return arg.pattern
    if isinstance(arg, str):
        return arg
    if (
        isinstance(arg, (list, tuple))
        and len(arg) == 2
        and isinstance(arg[0], str)
        and arg[0] in _PATTERN_TAGS
    ):
        return extract_pattern(arg[1])
    return None


def extract_range(arg: Any) -> Optional[Span]:
    if isinstance(arg, Span):
        return arg
    if isinstance(arg, range):
        return Span.from_range(arg)
    if _tagged(arg, "range"):
        if len(arg) == 2:
            return extract_range(arg[1])
        # ("range", start, end[, exclude_end])
        exclude_end = bool(arg[3]) if len(arg) > 3 else False
        return Span(arg[1], arg[2], exclude_end)
    if isinstance(arg, (list, tuple)) and len(arg) == 2:
        return Span(extract_numeric(arg[0]), extract_numeric(arg[1]))
    return None


def _tagged(arg: Any, tag: str) -> bool:
    return isinstance(arg, (list, tuple)) and len(arg) >= 2 and arg[0] == tag
