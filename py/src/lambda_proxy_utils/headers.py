from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

_SPECIAL_CASES: dict[str, str] = {
    "content-md5": "Content-MD5",
    "dnt": "DNT",
    "etag": "ETag",
    "last-event-id": "Last-Event-ID",
    "tcn": "TCN",
    "te": "TE",
    "www-authenticate": "WWW-Authenticate",
    "x-att-deviceid": "X-ATT-DeviceId",
    "x-dnsprefetch-control": "X-DNSPrefetch-Control",
    "x-ua-compatible": "X-UA-Compatible",
    "x-uidh": "X-UIDH",
    "x-xss-protection": "X-XSS-Protection",
}


def normalize_header_name(name: str) -> str:
    lower = str(name or "").strip().lower()
    if lower in _SPECIAL_CASES:
        return _SPECIAL_CASES[lower]
    return "-".join(part[:1].upper() + part[1:] for part in lower.split("-"))


def case_variants(name: str, count: int) -> list[str]:
    """Return up to ``count`` distinct casings of ``name``.

    The first variant is the name itself; variant ``i`` flips the case of the
    letters selected by the bits of ``i``, leftmost letter first.
    """
    letters = [i for i, ch in enumerate(name) if ch.isalpha()]
    limit = min(int(count), 1 << len(letters))

    out: list[str] = []
    for n in range(limit):
        chars = list(name)
        for bit, pos in enumerate(letters):
            if n & (1 << bit):
                chars[pos] = chars[pos].swapcase()
        out.append("".join(chars))
    return out


class Headers(MutableMapping[str, Any]):
    """Ordered header mapping with case-insensitive keys.

    The case used when a field is first set is kept for output; later writes
    under another casing update the same entry.
    """

    __slots__ = ("_store",)

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._store: dict[str, tuple[str, Any]] = {}
        if initial:
            self.update(initial)

    def __getitem__(self, key: str) -> Any:
        return self._store[_fold(key)][1]

    def __setitem__(self, key: str, value: Any) -> None:
        folded = _fold(key)
        existing = self._store.get(folded)
        display = existing[0] if existing is not None else str(key).strip()
        self._store[folded] = (display, value)

    def __delitem__(self, key: str) -> None:
        del self._store[_fold(key)]

    def __iter__(self) -> Iterator[str]:
        return (display for display, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _fold(key) in self._store

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self.lower_items() == {_fold(k): v for k, v in other.items()}

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    def display_name(self, key: str) -> str | None:
        entry = self._store.get(_fold(key))
        return entry[0] if entry is not None else None

    def lower_items(self) -> dict[str, Any]:
        return {folded: value for folded, (_, value) in self._store.items()}

    def copy(self) -> Headers:
        out = Headers()
        out._store = dict(self._store)
        return out

    def to_dict(self, case: str = "preserve") -> dict[str, Any]:
        out: dict[str, Any] = {}
        for folded, (display, value) in self._store.items():
            if case == "canonical":
                key = normalize_header_name(folded)
            elif case == "lower":
                key = folded
            else:
                key = display
            out[key] = list(value) if isinstance(value, list) else value
        return out


def _fold(key: str) -> str:
    return str(key).strip().lower()
