"""HTML escaping and URL scheme allow-listing for rendered output"""

import re


_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}
_HTML_SPECIAL_RE = re.compile(r"[&<>\"']")
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)


def sanitize_html(text) -> str:
    """Escape & < > " ' in a single pass. Falsy input (None, "", 0) yields ""."""
    if not text:
        return ""
    return _HTML_SPECIAL_RE.sub(lambda m: _HTML_ESCAPES[m.group(0)], str(text))


def sanitize_url(url) -> str:
    """Return url if its scheme is http(s) or it is relative, else "".

    Protocol-relative URLs ("//host/path") are pinned to https.
    """
    if not url:
        return ""
    url = str(url)
    if _HTTP_RE.match(url):
        return url
    if url.startswith("//"):
        return f"https:{url}"
    if ":" not in url:
        return url
    return ""
