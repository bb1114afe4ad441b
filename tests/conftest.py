from typing import Callable

import pytest

from weburl import URL, PackageOptions, UrlPackage


@pytest.fixture
def package() -> UrlPackage:
    """Fixture providing a package with default options."""
    return UrlPackage()


@pytest.fixture
def legacy_package() -> UrlPackage:
    """Fixture providing a package where a None fragment clears the query."""
    return UrlPackage(PackageOptions(fragment_none_clears_query=True))


@pytest.fixture
def make_url() -> Callable[[str], URL]:
    """Fixture providing a URL factory."""

    def _make_url(url: str = "http://test.dev/") -> URL:
        return URL(url)

    return _make_url
