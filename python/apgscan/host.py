# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Turn markup, files and URLs into a document tree the analyzer can walk."""
import sys
import urllib.error
import urllib.request
from pathlib import Path

from bs4 import BeautifulSoup
from bs4.element import Tag

PARSER = "html.parser"
USER_AGENT = "apgscan"


def parse_html(markup):
    """Parse an HTML string (or bytes) into a BeautifulSoup document."""
    return BeautifulSoup(markup, PARSER)


def load_file(path, encoding="utf-8"):
    return parse_html(Path(path).read_text(encoding=encoding))


def fetch_url(url, timeout=30):
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            charset = response.headers.get_content_charset() or "utf-8"
            body = response.read().decode(charset, errors="replace")
    except urllib.error.HTTPError as e:
        raise ValueError(f"HTTP {e.code} fetching {url}: {e.reason}") from e
    except urllib.error.URLError as e:
        raise ValueError(f"Failed to fetch {url}: {e.reason}") from e
    return parse_html(body)


def is_url(source):
    return str(source).startswith(("http://", "https://"))


def load_document(source):
    """Load a document from a URL, `-` (stdin) or a file path."""
    if is_url(source):
        return fetch_url(str(source))
    if str(source) == "-":
        return parse_html(sys.stdin.read())
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"No such file: {path}")
    return load_file(path)


def resolve_root(root):
    """Accept either a parsed node or raw markup."""
    if isinstance(root, Tag):
        return root
    if isinstance(root, (str, bytes)):
        return parse_html(root)
    raise TypeError(f"expected a bs4 Tag or HTML markup, got {type(root).__name__}")
