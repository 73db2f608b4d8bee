"""Content classification and per-type cache/security policy for static responses."""

import mimetypes
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Mapping

DEFAULT_MIME_TYPE = "application/octet-stream"

# Pinned so results do not depend on the host's mimetypes registry
# (e.g. newer Pythons report .js as text/javascript).
WEB_MIME_TYPES = {
    ".html": "text/html",
    ".htm": "text/html",
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".css": "text/css",
    ".json": "application/json",
    ".map": "application/json",
    ".webmanifest": "application/manifest+json",
    ".txt": "text/plain",
    ".xml": "application/xml",
    ".wasm": "application/wasm",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".ico": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
}

ONE_DAY = 86400
SEVEN_DAYS = 7 * ONE_DAY
THIRTY_DAYS = 30 * ONE_DAY

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "img-src 'self' data: blob: https:; "
    "style-src 'self' 'unsafe-inline'; "
    "script-src 'self' 'unsafe-inline' 'unsafe-eval'; "
    "connect-src 'self' https:;"
)

GLOBAL_SECURITY_HEADERS = MappingProxyType(
    {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "X-XSS-Protection": "1; mode=block",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }
)


def classify(path: str) -> str:
    """Return the MIME type for *path* based on its extension."""
    name = PurePosixPath(path).name
    suffix = PurePosixPath(name).suffix.lower()
    if suffix in WEB_MIME_TYPES:
        return WEB_MIME_TYPES[suffix]
    mime_type, _ = mimetypes.guess_type(name, strict=False)
    return mime_type or DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class CachePolicy:
    cache_control: str
    extra_headers: Mapping[str, str] = field(default_factory=dict)

    def headers(self) -> dict[str, str]:
        return {"Cache-Control": self.cache_control, **self.extra_headers}


def cache_policy_for(mime_type: str) -> CachePolicy:
    """Map a MIME type to its Cache-Control directive and security headers."""
    extra_headers = {"X-Content-Type-Options": "nosniff"}

    if mime_type.startswith("image/"):
        return CachePolicy(f"public, max-age={THIRTY_DAYS}", extra_headers)
    if mime_type in ("application/javascript", "text/css"):
        return CachePolicy(f"public, max-age={SEVEN_DAYS}", extra_headers)
    if mime_type == "text/html":
        extra_headers.update(
            {
                "X-Frame-Options": "DENY",
                "X-XSS-Protection": "1; mode=block",
                "Content-Security-Policy": CONTENT_SECURITY_POLICY,
            }
        )
        return CachePolicy("no-cache, must-revalidate", extra_headers)
    return CachePolicy(f"public, max-age={ONE_DAY}", extra_headers)
