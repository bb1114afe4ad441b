"""src/weburl/__init__.py

WebURL - WHATWG URL values for embedding hosts.

WebURL parses absolute URLs the way browsers do and exposes a mutable URL
value whose setters keep every component normalized, together with an
ordered multimap view of the query string.

Key Features:
    - WHATWG URL parsing (special schemes, IDNA, IPv4/IPv6 hosts)
    - Component setters with browser semantics (silent scheme rejection)
    - Ordered query pair operations: append, set, get, get-all, delete
    - Canonical serialization that survives repeated parse cycles
    - Immutable operation table for embedding hosts
    - Full type hints (PEP 561)

Example:
    Direct usage::

        from weburl import URL

        url = URL('http://test.dev/?q=a&q=b')
        url.query_set('q', 'name')
        url.scheme = 'https'
        print(url.href)  # https://test.dev/?q=name

    Host usage::

        from weburl import UrlPackage

        package = UrlPackage()
        url = package.call('Url', 'http://test.dev/?page=2')
        package.call('query_remove', url, 'page')
        print(package.get(url, 'href'))  # http://test.dev/
"""

from weburl.config import PackageOptions, ParserOptions
from weburl.exceptions import EvaluationError, ParseError, WebUrlError
from weburl.package import UrlPackage
from weburl.url import URL, parse
from weburl.version import __version__

__all__ = [
    "URL",
    "parse",
    "UrlPackage",
    "ParserOptions",
    "PackageOptions",
    "WebUrlError",
    "ParseError",
    "EvaluationError",
    "__version__",
]
