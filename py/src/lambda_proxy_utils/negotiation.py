"""Content negotiation and content-type matching.

Accept-style headers are parsed into entries with a quality value. Each
candidate is scored against every entry: an exact match outranks a wildcard
match (specificity), then the higher quality wins, then the later entry. The
scored candidates are ordered by quality, specificity, entry position and
finally candidate position, and anything scored at ``q=0`` is unacceptable.

``type_is`` answers the narrower question "does this Content-Type match one
of these patterns", accepting short tokens (``json``), full types
(``text/html``), wildcards (``text/*``) and structured suffixes (``+json``).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from lambda_proxy_utils import mime
from lambda_proxy_utils.util import flatten_candidates, to_str

_media_type_re = re.compile(r"^\s*([^\s/;]+)/([^;\s]+)\s*(?:;(.*))?$")
_simple_token_re = re.compile(r"^\s*([^\s;]+)\s*(?:;(.*))?$")
_language_re = re.compile(r"^\s*([^\s\-;]+)(?:-([^\s;]+))?\s*(?:;(.*))?$")
_content_type_re = re.compile(r"^[!#$%&'*+.^_`|~0-9a-z-]+/[!#$%&'*+.^_`|~0-9a-z-]+$")


@dataclass(slots=True)
class _Spec:
    value: str
    q: float
    i: int
    subtype: str = ""
    prefix: str = ""
    suffix: str = ""
    params: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class _Priority:
    i: int
    o: int = -1
    q: float = 0.0
    s: int = 0


Specify = Callable[[str, _Spec, int], "_Priority | None"]


def preferred_media_types(accept: str | None, provided: Sequence[str] | None = None) -> list[str]:
    specs = _parse_header(
        "*/*" if accept is None else (accept or ""),
        _parse_media_type,
        split=_split_media_types,
    )
    if provided is None:
        return [f"{s.value}/{s.subtype}" for s in _sorted_specs(specs)]
    return _preferred(specs, provided, _specify_media_type)


def preferred_charsets(accept: str | None, provided: Sequence[str] | None = None) -> list[str]:
    specs = _parse_header("*" if accept is None else (accept or ""), _parse_simple)
    if provided is None:
        return [s.value for s in _sorted_specs(specs)]
    return _preferred(specs, provided, _specify_simple)


def preferred_encodings(accept: str | None, provided: Sequence[str] | None = None) -> list[str]:
    specs = _parse_header(accept or "", _parse_simple)

    if not any(s.value.lower() == "identity" for s in specs):
        min_q = min([s.q for s in specs], default=1.0)
        specs.append(_Spec(value="identity", q=min(min_q, 1.0), i=len(specs)))

    if provided is None:
        return [s.value for s in _sorted_specs(specs)]
    return _preferred(specs, provided, _specify_simple)


def preferred_languages(accept: str | None, provided: Sequence[str] | None = None) -> list[str]:
    specs = _parse_header("*" if accept is None else (accept or ""), _parse_language)
    if provided is None:
        return [s.value for s in _sorted_specs(specs)]
    return _preferred(specs, provided, _specify_language)


def best_match(header: str | None, candidates: Sequence[str]) -> str | None:
    """Best media type among ``candidates`` for an Accept header, or None."""
    found = preferred_media_types(header, list(candidates))
    return found[0] if found else None


def accepts_types(accept: str | None, *types: Any) -> str | list[str] | bool:
    candidates = flatten_candidates(types)
    if not candidates:
        return preferred_media_types(accept)

    if not accept:
        return candidates[0]

    mimes = [c if "/" in c else mime.lookup(c) for c in candidates]
    found = preferred_media_types(accept, [m for m in mimes if m])
    if not found:
        return False
    return candidates[mimes.index(found[0])]


def accepts_charsets(accept: str | None, *charsets: Any) -> str | list[str] | bool:
    candidates = flatten_candidates(charsets)
    if not candidates:
        return preferred_charsets(accept)
    found = preferred_charsets(accept, candidates)
    return found[0] if found else False


def accepts_encodings(accept: str | None, *encodings: Any) -> str | list[str] | bool:
    candidates = flatten_candidates(encodings)
    if not candidates:
        return preferred_encodings(accept)
    found = preferred_encodings(accept, candidates)
    return found[0] if found else False


def accepts_languages(accept: str | None, *languages: Any) -> str | list[str] | bool:
    candidates = flatten_candidates(languages)
    if not candidates:
        return preferred_languages(accept)
    found = preferred_languages(accept, candidates)
    return found[0] if found else False


def type_is(value: Any, *types: Any) -> str | bool:
    """Match a Content-Type value against patterns.

    Returns the matching pattern (or the actual type when the pattern is a
    wildcard or suffix), the actual type when no patterns are given, and
    False when nothing matches or the value is not a valid media type.
    """
    actual = _normalize_content_type(value)
    if not actual:
        return False

    patterns = flatten_candidates(types)
    if not patterns:
        return actual

    for pattern in patterns:
        expected = _normalize_pattern(pattern)
        if expected and _mime_match(expected, actual):
            if pattern.startswith("+") or "*" in pattern:
                return actual
            return pattern
    return False


def _parse_header(
    header: str,
    parse: Callable[[str, int], _Spec | None],
    *,
    split: Callable[[str], list[str]] | None = None,
) -> list[_Spec]:
    parts = split(header) if split else header.split(",")
    specs: list[_Spec] = []
    for part in parts:
        spec = parse(part.strip(), len(specs))
        if spec is not None:
            specs.append(spec)
    return specs


def _preferred(specs: list[_Spec], provided: Sequence[str], specify: Specify) -> list[str]:
    priorities = [_priority_for(candidate, specs, index, specify) for index, candidate in enumerate(provided)]
    accepted = [p for p in priorities if p.q > 0]
    accepted.sort(key=lambda p: (-p.q, -p.s, p.o, p.i))
    return [provided[p.i] for p in accepted]


def _priority_for(candidate: str, specs: list[_Spec], index: int, specify: Specify) -> _Priority:
    priority = _Priority(i=index)
    for spec in specs:
        found = specify(candidate, spec, index)
        if found is None:
            continue
        if (priority.s - found.s or priority.q - found.q or priority.o - found.o) < 0:
            priority = found
    return priority


def _sorted_specs(specs: list[_Spec]) -> list[_Spec]:
    return sorted((s for s in specs if s.q > 0), key=lambda s: (-s.q, s.i))


def _parse_media_type(value: str, index: int) -> _Spec | None:
    match = _media_type_re.match(value)
    if not match:
        return None

    params: dict[str, str] = {}
    q = 1.0
    if match.group(3):
        for pair in _split_quoted(match.group(3), ";"):
            key, _, raw = pair.strip().partition("=")
            key = key.strip().lower()
            val = raw.strip()
            if len(val) >= 2 and val[0] == '"' and val[-1] == '"':
                val = val[1:-1]
            if key == "q":
                q = _parse_quality(val)
                break
            params[key] = val

    return _Spec(value=match.group(1), subtype=match.group(2), params=params, q=q, i=index)


def _parse_simple(value: str, index: int) -> _Spec | None:
    match = _simple_token_re.match(value)
    if not match:
        return None
    return _Spec(value=match.group(1), q=_quality_from_params(match.group(2)), i=index)


def _parse_language(value: str, index: int) -> _Spec | None:
    match = _language_re.match(value)
    if not match:
        return None
    prefix = match.group(1)
    suffix = match.group(2) or ""
    full = f"{prefix}-{suffix}" if suffix else prefix
    return _Spec(value=full, prefix=prefix, suffix=suffix, q=_quality_from_params(match.group(3)), i=index)


def _specify_media_type(candidate: str, spec: _Spec, index: int) -> _Priority | None:
    parsed = _parse_media_type(candidate, index)
    if parsed is None:
        return None

    s = 0
    if spec.value.lower() == parsed.value.lower():
        s |= 4
    elif spec.value != "*":
        return None

    if spec.subtype.lower() == parsed.subtype.lower():
        s |= 2
    elif spec.subtype != "*":
        return None

    if spec.params:
        for key, expected in spec.params.items():
            if expected == "*":
                continue
            if expected.lower() != parsed.params.get(key, "").lower():
                return None
        s |= 1

    return _Priority(i=index, o=spec.i, q=spec.q, s=s)


def _specify_simple(candidate: str, spec: _Spec, index: int) -> _Priority | None:
    s = 0
    if spec.value.lower() == candidate.lower():
        s |= 1
    elif spec.value != "*":
        return None
    return _Priority(i=index, o=spec.i, q=spec.q, s=s)


def _specify_language(candidate: str, spec: _Spec, index: int) -> _Priority | None:
    parsed = _parse_language(candidate, index)
    if parsed is None:
        return None

    full = parsed.value.lower()
    s = 0
    if spec.value.lower() == full:
        s |= 4
    elif spec.prefix.lower() == full:
        s |= 2
    elif spec.value.lower() == parsed.prefix.lower():
        s |= 1
    elif spec.value != "*":
        return None
    return _Priority(i=index, o=spec.i, q=spec.q, s=s)


def _quality_from_params(raw: str | None) -> float:
    if not raw:
        return 1.0
    for pair in raw.split(";"):
        key, _, val = pair.strip().partition("=")
        if key.strip() == "q":
            return _parse_quality(val.strip())
    return 1.0


def _parse_quality(value: str) -> float:
    try:
        q = float(value)
    except ValueError:
        return 0.0
    if q != q:
        return 0.0
    return q


def _split_media_types(header: str) -> list[str]:
    return _split_quoted(header, ",")


def _split_quoted(value: str, sep: str) -> list[str]:
    parts = value.split(sep)
    out: list[str] = []
    for part in parts:
        if out and out[-1].count('"') % 2 == 1:
            out[-1] = out[-1] + sep + part
        else:
            out.append(part)
    return [p.strip() for p in out]


def _normalize_content_type(value: Any) -> str | None:
    raw = to_str(value).split(";", 1)[0].strip().lower()
    if not raw or not _content_type_re.match(raw):
        return None
    return raw


def _normalize_pattern(pattern: str) -> str | None:
    match pattern:
        case "urlencoded":
            return "application/x-www-form-urlencoded"
        case "multipart":
            return "multipart/*"
    if pattern.startswith("+"):
        return "*/*" + pattern
    if "/" not in pattern:
        return mime.lookup(pattern)
    return pattern.lower()


def _mime_match(expected: str, actual: str) -> bool:
    expected_parts = expected.split("/")
    actual_parts = actual.split("/")
    if len(expected_parts) != 2 or len(actual_parts) != 2:
        return False

    if expected_parts[0] != "*" and expected_parts[0] != actual_parts[0]:
        return False

    expected_sub = expected_parts[1]
    if expected_sub.startswith("*+"):
        suffix = expected_sub[1:]
        return len(expected_sub) <= len(actual_parts[1]) + 1 and actual_parts[1].endswith(suffix)

    return expected_sub == "*" or expected_sub == actual_parts[1]
