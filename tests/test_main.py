"""Tests for the command-line entry point and CrawlerApp."""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from sitemap_crawler.main import CrawlerApp, apply_overrides, build_parser, main
from sitemap_crawler.exceptions import ConfigError
from sitemap_crawler.utils.config import Config


def _page(title, *hrefs):
    links = "".join(f'<a href="{href}">{href}</a>' for href in hrefs)
    return web.Response(text=f"<html><head><title>{title}</title></head><body>{links}</body></html>",
                        content_type="text/html")


def _site() -> web.Application:
    async def home(request):
        return _page("Home", "/about", "/admin", "/missing", "mailto:someone@example.com")

    async def about(request):
        return _page("About", "/", "/about/team")

    async def team(request):
        return _page("Team")

    async def admin(request):
        return _page("Admin")

    app = web.Application()
    app.router.add_get("/", home)
    app.router.add_get("/about", about)
    app.router.add_get("/about/team", team)
    app.router.add_get("/admin", admin)
    return app


class TestArguments:
    """Tests for build_parser and apply_overrides."""

    def test_flags_override_config(self):
        args = build_parser().parse_args([
            "https://example.com",
            "--changefreq", "daily",
            "--save-path", "/tmp/out/sitemap.xml",
            "--exclude-patterns", "/admin, logout",
            "--max-concurrent", "3",
            "--max-pages", "50",
            "--timeout", "5",
        ])

        config = apply_overrides(Config(), args)

        assert args.url == "https://example.com"
        assert config.sitemap.changefreq == "daily"
        assert config.sitemap.save_path == "/tmp/out/sitemap.xml"
        assert config.crawler.exclude_patterns == ["/admin", "logout"]
        assert config.crawler.max_concurrent_requests == 3
        assert config.crawler.max_pages == 50
        assert config.crawler.request_timeout == 5

    def test_unset_flags_keep_config_values(self):
        config = Config()
        config.sitemap.changefreq = "hourly"

        apply_overrides(config, build_parser().parse_args(["https://example.com"]))

        assert config.sitemap.changefreq == "hourly"
        assert config.crawler.max_concurrent_requests == 10

    def test_invalid_override_raises(self):
        args = build_parser().parse_args(["https://example.com", "--max-concurrent", "0"])
        with pytest.raises(ConfigError):
            apply_overrides(Config(), args)


class TestMain:
    """Tests for the exit codes of main()."""

    def test_invalid_seed_exits_with_failure(self):
        assert main(["example.com"]) == 1

    def test_invalid_changefreq_exits_with_failure(self, capsys):
        assert main(["https://example.com", "--changefreq", "sometimes"]) == 1
        assert "changefreq" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(["https://example.com", "--config", str(tmp_path / "nope.yaml")]) == 1
        assert "not found" in capsys.readouterr().err


class TestCrawlerApp:
    """Full runs against an in-process site."""

    def _run(self, config):
        async def run():
            server = TestServer(_site())
            await server.start_server()
            try:
                seed = str(server.make_url("/"))
                return seed, await CrawlerApp(config).run(seed)
            finally:
                await server.close()

        return asyncio.run(run())

    def test_writes_both_documents(self, tmp_path):
        config = Config()
        config.sitemap.save_path = str(tmp_path / "sitemap.xml")
        config.crawler.exclude_patterns = ["/admin"]

        seed, code = self._run(config)

        assert code == 0
        sitemap = (tmp_path / "sitemap.xml").read_text(encoding="utf-8")
        tree = (tmp_path / "sitemap.html").read_text(encoding="utf-8")
        assert f"<loc>{seed}</loc>" in sitemap
        assert f"<loc>{seed}about</loc>" in sitemap
        assert f"<loc>{seed}about/team</loc>" in sitemap
        assert "admin" not in sitemap
        assert "missing" not in sitemap
        assert "mailto" not in sitemap
        assert ">About</a>" in tree

    def test_unwritable_target_fails(self, tmp_path):
        blocked = tmp_path / "sitemap.xml"
        blocked.mkdir()
        config = Config()
        config.sitemap.save_path = str(blocked)

        _, code = self._run(config)

        assert code == 1
