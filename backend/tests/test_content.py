import pytest

from spa_host.content import (
    CONTENT_SECURITY_POLICY,
    DEFAULT_MIME_TYPE,
    cache_policy_for,
    classify,
)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("assets/app.js", "application/javascript"),
        ("assets/chunk.mjs", "application/javascript"),
        ("assets/app.css", "text/css"),
        ("index.html", "text/html"),
        ("logo.PNG", "image/png"),
        ("photo.jpeg", "image/jpeg"),
        ("icon.svg", "image/svg+xml"),
        ("favicon.ico", "image/x-icon"),
        ("fonts/inter.woff2", "font/woff2"),
        ("assets/app.js.map", "application/json"),
        ("data.pdf", "application/pdf"),
        ("archive.unknownext", DEFAULT_MIME_TYPE),
        ("LICENSE", DEFAULT_MIME_TYPE),
    ],
)
def test_classify(path, expected):
    assert classify(path) == expected


@pytest.mark.parametrize(
    ("mime_type", "cache_control"),
    [
        ("image/png", "public, max-age=2592000"),
        ("image/svg+xml", "public, max-age=2592000"),
        ("application/javascript", "public, max-age=604800"),
        ("text/css", "public, max-age=604800"),
        ("text/html", "no-cache, must-revalidate"),
        ("application/json", "public, max-age=86400"),
        ("font/woff2", "public, max-age=86400"),
        ("application/octet-stream", "public, max-age=86400"),
    ],
)
def test_cache_control(mime_type, cache_control):
    policy = cache_policy_for(mime_type)
    assert policy.cache_control == cache_control
    assert policy.headers()["Cache-Control"] == cache_control
    assert policy.extra_headers["X-Content-Type-Options"] == "nosniff"


def test_html_policy_adds_frame_xss_and_csp_headers():
    headers = cache_policy_for("text/html").headers()
    assert headers["X-Frame-Options"] == "DENY"
    assert headers["X-XSS-Protection"] == "1; mode=block"
    assert headers["Content-Security-Policy"] == (
        "default-src 'self'; img-src 'self' data: blob: https:; style-src 'self' 'unsafe-inline'; "
        "script-src 'self' 'unsafe-inline' 'unsafe-eval'; connect-src 'self' https:;"
    )
    assert headers["Content-Security-Policy"] == CONTENT_SECURITY_POLICY


@pytest.mark.parametrize("mime_type", ["application/javascript", "image/png", "application/json"])
def test_non_html_policy_has_no_csp(mime_type):
    assert "Content-Security-Policy" not in cache_policy_for(mime_type).headers()
