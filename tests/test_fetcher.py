import asyncio

import pytest
from aiohttp import ClientSession, web
from bs4.exceptions import ParserRejectedMarkup

import focus_scout.crawler.fetcher as fetcher_module
from focus_scout.crawler.errors import ContentFetchError, NetworkFetchError, StatusFetchError
from focus_scout.crawler.fetcher import Fetcher


def make_app() -> web.Application:
    app = web.Application()

    async def page(_):
        return web.Response(
            text='<html><body><a href="/next">Next</a> héllo</body></html>',
            content_type="text/html",
        )

    async def gone(_):
        return web.Response(status=410, text="gone")

    async def image(_):
        return web.Response(body=b"\x89PNG", content_type="image/png")

    async def broken_bytes(_):
        return web.Response(
            body=b"<html><body><p>caf\xe9 widget</p></body></html>",
            headers={"Content-Type": "text/html; charset=utf-8"},
        )

    async def slow(_):
        await asyncio.sleep(2)
        return web.Response(text="<p>late</p>", content_type="text/html")

    app.router.add_get("/page", page)
    app.router.add_get("/gone", gone)
    app.router.add_get("/image", image)
    app.router.add_get("/broken-bytes", broken_bytes)
    app.router.add_get("/slow", slow)
    return app


@pytest.mark.asyncio()
async def test_fetch_parses_html(serve_app, make_config):
    async for base in serve_app(make_app()):
        async with ClientSession() as session:
            page = await Fetcher(session, make_config()).fetch(f"{base}/page")

    assert page.url == f"{base}/page"
    assert [l.target for l in page.links] == [f"{base}/next"]
    assert "héllo" in page.text
    assert page.raw.decode("utf-8").startswith("<html>")


@pytest.mark.asyncio()
async def test_fetch_failure_kinds(serve_app, make_config):
    async for base in serve_app(make_app()):
        async with ClientSession() as session:
            fetcher = Fetcher(session, make_config(timeout=0.5))

            with pytest.raises(StatusFetchError) as status:
                await fetcher.fetch(f"{base}/gone")
            assert status.value.status == 410

            with pytest.raises(StatusFetchError):
                await fetcher.fetch(f"{base}/nothing-here")

            with pytest.raises(ContentFetchError):
                await fetcher.fetch(f"{base}/image")

            with pytest.raises(NetworkFetchError):
                await fetcher.fetch(f"{base}/slow")

    async with ClientSession() as session:
        with pytest.raises(NetworkFetchError):
            await Fetcher(session, make_config()).fetch("http://127.0.0.1:1/")


@pytest.mark.asyncio()
async def test_invalid_bytes_are_replaced_not_fatal(serve_app, make_config):
    async for base in serve_app(make_app()):
        async with ClientSession() as session:
            page = await Fetcher(session, make_config()).fetch(f"{base}/broken-bytes")

    assert "caf\ufffd widget" in page.text
    assert page.raw.endswith(b"</html>")


@pytest.mark.asyncio()
async def test_rejected_markup_is_a_content_failure(serve_app, make_config, monkeypatch):
    def reject(html, url, raw=None):
        raise ParserRejectedMarkup("unknown status keyword in marked section")

    monkeypatch.setattr(fetcher_module, "parse_html", reject)
    async for base in serve_app(make_app()):
        async with ClientSession() as session:
            with pytest.raises(ContentFetchError) as err:
                await Fetcher(session, make_config()).fetch(f"{base}/page")

    assert isinstance(err.value.__cause__, ParserRejectedMarkup)
