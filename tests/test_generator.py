"""
End-to-end sitemap generation tests.
"""

import asyncio
import pytest
from datetime import datetime

from sitemapgen import (
    InvalidDateError,
    SitemapConfig,
    SitemapGenerator,
    SlugSourceError,
    UrlEntry,
    generate_sitemap_xml,
)


pytestmark = [pytest.mark.asyncio, pytest.mark.integration]

BASE = "https://website.net"
ABOUT_WITH_META = [
    "<url>",
    f"<loc>{BASE}/about</loc>",
    "<lastmod>2020-01-01T00:00:00.000Z</lastmod>",
    "<changefreq>monthly</changefreq>",
    "<priority>0.3</priority>",
    "</url>",
]


@pytest.fixture
def generator(settings):
    return SitemapGenerator(settings)


class TestUrls:
    """Test generation from URL entries."""

    async def test_full_urls(self, generator, wrap):
        """Test absolute locations without a base URL."""
        xml = await generator.generate({
            "baseURL": "",
            "defaults": {},
            "routes": [],
            "urls": [{"loc": BASE}, {"loc": f"{BASE}/about"}],
        })

        assert xml == wrap(f"<url><loc>{BASE}</loc></url><url><loc>{BASE}/about</loc></url>")

    async def test_partial_urls_with_base(self, generator, wrap):
        """Test relative locations are joined to the base URL."""
        xml = await generator.generate({"baseURL": BASE, "urls": [{"loc": "/"}, {"loc": "/about"}]})

        assert xml == wrap(f"<url><loc>{BASE}</loc></url><url><loc>{BASE}/about</loc></url>")

    async def test_removes_trailing_slashes(self, generator, wrap):
        """Test trailing slashes are removed by default."""
        xml = await generator.generate({
            "baseURL": BASE,
            "urls": [{"loc": "/"}, {"loc": "/about"}, {"loc": "/page/"}],
        })

        assert xml == wrap([
            f"<url><loc>{BASE}</loc></url><url><loc>{BASE}/about</loc></url>",
            f"<url><loc>{BASE}/page</loc></url>",
        ])

    async def test_adds_trailing_slashes(self, generator, wrap):
        """Test the trailing slash option."""
        xml = await generator.generate({
            "baseURL": BASE,
            "urls": [{"loc": "/"}, {"loc": "/about"}, {"loc": "/page/"}],
            "trailingSlash": True,
        })

        assert xml == wrap([
            f"<url><loc>{BASE}/</loc></url><url><loc>{BASE}/about/</loc></url>",
            f"<url><loc>{BASE}/page/</loc></url>",
        ])

    async def test_encodes_uris(self, generator, wrap):
        """Test locations are percent-encoded then XML-escaped."""
        xml = await generator.generate({
            "baseURL": BASE,
            "urls": [{"loc": '/search?color="always"&reverse-order'}],
        })

        assert xml == wrap(f"<url><loc>{BASE}/search?color=%22always%22&amp;reverse-order</loc></url>")

        xml = await generator.generate({"baseURL": "https://éléphant.net", "urls": [{"loc": "/about"}]})

        assert xml == wrap("<url><loc>https://%C3%A9l%C3%A9phant.net/about</loc></url>")

    async def test_per_url_meta(self, generator, wrap):
        """Test per-URL metadata."""
        xml = await generator.generate({
            "urls": [{
                "loc": f"{BASE}/about",
                "changefreq": "monthly",
                "lastmod": "2020-01-01",
                "priority": 0.3,
            }],
        })

        assert xml == wrap(ABOUT_WITH_META)

    async def test_default_meta(self, generator, wrap):
        """Test global defaults apply to URLs."""
        xml = await generator.generate({
            "defaults": {"changefreq": "monthly", "lastmod": "2020-01-01", "priority": 0.3},
            "urls": [{"loc": f"{BASE}/about"}],
        })

        assert xml == wrap(ABOUT_WITH_META)

    async def test_url_meta_over_defaults(self, generator, wrap):
        """Test per-URL metadata wins over defaults."""
        xml = await generator.generate({
            "defaults": {"changefreq": "never", "priority": 0.8},
            "urls": [{
                "loc": f"{BASE}/about",
                "changefreq": "monthly",
                "lastmod": "2020-01-01",
                "priority": 0.3,
            }],
        })

        assert xml == wrap(ABOUT_WITH_META)

    async def test_dates_in_various_formats(self, generator, wrap):
        """Test string, datetime and epoch dates are normalized."""
        xml = await generator.generate({
            "urls": [
                {"loc": f"{BASE}/about", "lastmod": "December 17, 1995 03:24:00"},
                {"loc": f"{BASE}/info", "lastmod": datetime(1995, 12, 17, 3, 24)},
                {"loc": f"{BASE}/page", "lastmod": 1578485826000},
            ],
        })

        assert xml == wrap([
            f"<url><loc>{BASE}/about</loc><lastmod>1995-12-17T03:24:00.000Z</lastmod></url>",
            f"<url><loc>{BASE}/info</loc><lastmod>1995-12-17T03:24:00.000Z</lastmod></url>",
            f"<url><loc>{BASE}/page</loc><lastmod>2020-01-08T12:17:06.000Z</lastmod></url>",
        ])

    async def test_whole_number_priorities(self, generator, wrap):
        """Test whole-number priorities are written with a decimal."""
        xml = await generator.generate({
            "urls": [
                {"loc": f"{BASE}/about", "priority": 1.0},
                {"loc": f"{BASE}/old", "priority": 0.0},
            ],
        })

        assert xml == wrap([
            f"<url><loc>{BASE}/about</loc><priority>1.0</priority></url>",
            f"<url><loc>{BASE}/old</loc><priority>0.0</priority></url>",
        ])

    async def test_invalid_date(self, generator):
        """Test an unparseable date aborts generation."""
        with pytest.raises(InvalidDateError):
            await generator.generate({"urls": [{"loc": f"{BASE}/", "lastmod": "whenever"}]})


class TestRoutes:
    """Test generation from route definitions."""

    async def test_simple_routes(self, generator, wrap):
        """Test static routes."""
        xml = await generator.generate({"baseURL": BASE, "routes": [{"path": "/"}, {"path": "/about"}]})

        assert xml == wrap(f"<url><loc>{BASE}</loc></url><url><loc>{BASE}/about</loc></url>")

    async def test_route_loc(self, generator, wrap):
        """Test a route's loc replaces its path."""
        xml = await generator.generate({
            "baseURL": BASE,
            "routes": [{"path": "/"}, {"path": "/complicated/path/here", "loc": "/about"}],
        })

        assert xml == wrap(f"<url><loc>{BASE}</loc></url><url><loc>{BASE}/about</loc></url>")

    @pytest.mark.parametrize("trailing_slash,expected", [
        (False, [f"{BASE}", f"{BASE}/about", f"{BASE}/page"]),
        (True, [f"{BASE}/", f"{BASE}/about/", f"{BASE}/page/"]),
    ])
    async def test_trailing_slashes(self, generator, wrap, trailing_slash, expected):
        """Test the trailing slash policy applies to routes."""
        xml = await generator.generate({
            "baseURL": BASE,
            "routes": [{"path": "/"}, {"path": "/about"}, {"path": "/page/"}],
            "trailingSlash": trailing_slash,
        })

        assert xml == wrap([f"<url><loc>{loc}</loc></url>" for loc in expected])

    async def test_per_route_meta(self, generator, wrap):
        """Test route metadata, top-level or in a nested sitemap object."""
        meta = {"changefreq": "monthly", "lastmod": "2020-01-01", "priority": 0.3}

        top_level = await generator.generate({"baseURL": BASE, "routes": [{"path": "/about", **meta}]})
        nested = await generator.generate({"baseURL": BASE, "routes": [{"path": "/about", "sitemap": meta}]})

        assert top_level == wrap(ABOUT_WITH_META)
        assert nested == wrap(ABOUT_WITH_META)

    async def test_route_meta_over_defaults(self, generator, wrap):
        """Test route metadata wins over defaults."""
        xml = await generator.generate({
            "baseURL": BASE,
            "defaults": {"changefreq": "never", "priority": 0.8},
            "routes": [{"path": "/about", "changefreq": "monthly", "lastmod": "2020-01-01", "priority": 0.3}],
        })

        assert xml == wrap(ABOUT_WITH_META)

    async def test_slugs(self, generator, wrap):
        """Test one URL per slug, slugs top-level or nested."""
        slugs = ["my-first-article", "3-tricks-to-better-fold-your-socks"]
        expected = wrap([
            f"<url><loc>{BASE}/article/my-first-article</loc></url>",
            f"<url><loc>{BASE}/article/3-tricks-to-better-fold-your-socks</loc></url>",
        ])

        assert await generator.generate({
            "baseURL": BASE, "routes": [{"path": "/article/:title", "slugs": slugs}],
        }) == expected
        assert await generator.generate({
            "baseURL": BASE, "routes": [{"path": "/article/:title", "sitemap": {"slugs": slugs}}],
        }) == expected
        assert await generator.generate({
            "baseURL": BASE, "routes": [{"path": "/article/:title", "slugs": slugs + slugs}],
        }) == expected

    async def test_slug_meta(self, generator, wrap):
        """Test slug metadata wins over route metadata and defaults."""
        xml = await generator.generate({
            "baseURL": BASE,
            "defaults": {"priority": 0.1, "changefreq": "always"},
            "routes": [{
                "path": "/article/:title",
                "lastmod": "2020-01-01",
                "slugs": [
                    "my-first-article",
                    {
                        "slug": "3-tricks-to-better-fold-your-socks",
                        "changefreq": "never",
                        "lastmod": "2018-06-24",
                        "priority": 0.8,
                    },
                ],
            }],
        })

        assert xml == wrap([
            "<url>",
            f"<loc>{BASE}/article/my-first-article</loc>",
            "<lastmod>2020-01-01T00:00:00.000Z</lastmod>",
            "<changefreq>always</changefreq>",
            "<priority>0.1</priority>",
            "</url>",
            "<url>",
            f"<loc>{BASE}/article/3-tricks-to-better-fold-your-socks</loc>",
            "<lastmod>2018-06-24T00:00:00.000Z</lastmod>",
            "<changefreq>never</changefreq>",
            "<priority>0.8</priority>",
            "</url>",
        ])

    async def test_sync_slug_function(self, generator, wrap):
        """Test a synchronous slug function."""
        xml = await generator.generate({
            "baseURL": BASE, "routes": [{"path": "/user/:id", "slugs": lambda: range(3)}],
        })

        assert xml == wrap([f"<url><loc>{BASE}/user/{i}</loc></url>" for i in range(3)])

    async def test_async_slug_function(self, generator, wrap):
        """Test an asynchronous slug function."""
        async def fetch_users():
            await asyncio.sleep(0.05)
            return list(range(3))

        xml = await generator.generate({
            "baseURL": BASE, "routes": [{"path": "/user/:id", "slugs": fetch_users}],
        })

        assert xml == wrap([f"<url><loc>{BASE}/user/{i}</loc></url>" for i in range(3)])

    @pytest.mark.parametrize("skipped", [
        {"path": "/ignore/me", "ignoreRoute": True},
        {"path": "*", "name": "404"},
        {"path": "/user/:id"},
    ])
    async def test_skipped_routes(self, generator, wrap, skipped):
        """Test ignored, catch-all and slug-less dynamic routes are skipped."""
        xml = await generator.generate({
            "baseURL": BASE, "routes": [{"path": "/"}, {"path": "/about"}, skipped],
        })

        assert xml == wrap(f"<url><loc>{BASE}</loc></url><url><loc>{BASE}/about</loc></url>")

    async def test_failing_slug_source(self, generator):
        """Test a failing slug source aborts generation."""
        def broken():
            raise ConnectionError("api down")

        with pytest.raises(SlugSourceError):
            await generator.generate({"baseURL": BASE, "routes": [{"path": "/user/:id", "slugs": broken}]})

        assert generator.get_statistics()["failed_generations"] == 1


class TestRoutesAndUrls:
    """Test generation from both URLs and routes."""

    async def test_simple_sitemap(self, generator, wrap):
        """Test URLs come before routes."""
        xml = await generator.generate({"baseURL": BASE, "routes": [{"path": "/about"}], "urls": [{"loc": "/"}]})

        assert xml == wrap(f"<url><loc>{BASE}</loc></url><url><loc>{BASE}/about</loc></url>")

    async def test_discards_duplicates(self, generator, wrap):
        """Test duplicate locations are written once."""
        xml = await generator.generate({
            "baseURL": BASE,
            "routes": [{"path": "/"}, {"path": "/about"}],
            "urls": [{"loc": "/"}],
        })

        assert xml == wrap(f"<url><loc>{BASE}</loc></url><url><loc>{BASE}/about</loc></url>")


class TestGenerator:
    """Test the generator's options and statistics."""

    async def test_pretty_output(self, generator):
        """Test the pretty option changes layout only."""
        xml = await generator.generate({"baseURL": BASE, "urls": [{"loc": "/"}], "pretty": True})

        assert xml.splitlines() == [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            "  <url>",
            f"    <loc>{BASE}</loc>",
            "  </url>",
            "</urlset>",
        ]

    async def test_typed_config(self, generator, wrap):
        """Test typed configurations are accepted as is."""
        config = SitemapConfig(base_url=BASE, urls=[UrlEntry("/about")])

        assert await generator.generate(config) == wrap(f"<url><loc>{BASE}/about</loc></url>")

    async def test_deterministic(self, generator):
        """Test identical inputs give byte-identical output."""
        config = {
            "baseURL": BASE,
            "defaults": {"priority": 0.5},
            "urls": [{"loc": "/"}],
            "routes": [{"path": "/tag/:name", "slugs": ["b", "a"]}],
        }

        assert await generator.generate(config) == await generator.generate(config)

    async def test_statistics(self, generator):
        """Test statistics accumulate over generations."""
        await generator.generate({
            "baseURL": BASE,
            "urls": [{"loc": "/"}],
            "routes": [{"path": "/"}, {"path": "/about"}],
        })

        stats = generator.get_statistics()

        assert stats["total_generations"] == 1
        assert stats["urls_in"] == 1
        assert stats["routes_in"] == 2
        assert stats["candidates"] == 3
        assert stats["duplicates_dropped"] == 1
        assert stats["entries_written"] == 2
        assert stats["failed_generations"] == 0

    async def test_generate_sitemap_xml(self, settings, wrap):
        """Test the module-level entry point."""
        xml = await generate_sitemap_xml({"baseURL": BASE, "routes": [{"path": "/about"}]}, settings)

        assert xml == wrap(f"<url><loc>{BASE}/about</loc></url>")
