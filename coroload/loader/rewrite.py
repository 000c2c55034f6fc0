from __future__ import annotations

import re

# A call of the bare `require` identifier: not `obj.require(` and not `myrequire(`.
_REQUIRE_CALL = re.compile(r"(?<![\w$.])require\(")

_REQUIRE_LITERAL = re.compile(
    r"""(?<![\w$.])require\(\s*(?P<quote>['"])(?P<specifier>(?:\\.|(?!(?P=quote)).)*)(?P=quote)\s*\)"""
)


def rewrite_requires(source: str) -> str:
    """Turn every `require(` call into a suspension point: `yield require(`."""

    return _REQUIRE_CALL.sub("yield require(", source)


def find_requires(source: str) -> list[str]:
    """Return the string-literal specifiers passed to `require(...)`, in order, without duplicates.

    Calls with computed arguments are skipped; they can only be resolved at run time.
    """

    seen: dict[str, None] = {}
    for match in _REQUIRE_LITERAL.finditer(source):
        seen.setdefault(match.group("specifier"), None)
    return list(seen)
