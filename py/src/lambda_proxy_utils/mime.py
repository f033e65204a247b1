from __future__ import annotations

import mimetypes
import re

DEFAULT_TYPE = "application/octet-stream"

# Short tokens that the stdlib table lacks or maps differently across
# interpreter versions.
_OVERRIDES: dict[str, str] = {
    "text": "text/plain",
    "txt": "text/plain",
    "html": "text/html",
    "htm": "text/html",
    "json": "application/json",
    "js": "application/javascript",
    "mjs": "application/javascript",
    "css": "text/css",
    "csv": "text/csv",
    "xml": "application/xml",
    "md": "text/markdown",
    "markdown": "text/markdown",
    "webp": "image/webp",
    "avif": "image/avif",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ico": "image/x-icon",
    "svg": "image/svg+xml",
    "yaml": "text/yaml",
    "yml": "text/yaml",
    "wasm": "application/wasm",
}

_EXTENSIONS: dict[str, str] = {
    "text/plain": "txt",
    "text/html": "html",
    "application/json": "json",
    "application/javascript": "js",
    "text/javascript": "js",
    "application/xml": "xml",
    "text/xml": "xml",
    "image/jpeg": "jpeg",
    "text/markdown": "md",
}

_ext_pattern = re.compile(r"^.*[./\\]")

# A private table built from the interpreter's defaults only, so results do
# not depend on /etc/mime.types of the host.
_db = mimetypes.MimeTypes()


def lookup(token: str, default: str | None = None) -> str | None:
    """Resolve a short token, extension or file name to a MIME type.

    ``lookup("html")``, ``lookup(".html")`` and ``lookup("a/b/page.html")`` all
    return ``"text/html"``. Unknown tokens return ``default``.
    """
    ext = _ext_pattern.sub("", str(token or "").strip()).lower()
    if not ext:
        return default
    if ext in _OVERRIDES:
        return _OVERRIDES[ext]

    dotted = "." + ext
    found = _db.types_map[True].get(dotted) or _db.types_map[False].get(dotted)
    return found or default


def extension(mime_type: str) -> str | None:
    essence = str(mime_type or "").split(";", 1)[0].strip().lower()
    if not essence:
        return None
    if essence in _EXTENSIONS:
        return _EXTENSIONS[essence]

    exts = _db.guess_all_extensions(essence, strict=False)
    if not exts:
        return None
    return exts[0].lstrip(".")
