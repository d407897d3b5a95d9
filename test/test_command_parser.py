import asyncio

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from voice.command_parser import CommandParser


def serve_and_parse(handler, utterance, **parser_kwargs):
    """Run `handler` as the message endpoint and parse one utterance against it."""
    received = []

    async def endpoint(request):
        received.append(await request.json())
        return await handler(request)

    async def main():
        app = web.Application()
        app.router.add_post("/message", endpoint)
        async with test_utils.TestServer(app) as server:
            base = str(server.make_url("/"))
            async with CommandParser(base, endpoint="/message", backoff_factor=0,
                                     **parser_kwargs) as parser:
                return await parser.parse(utterance)

    return asyncio.run(main()), received


def test_parsed_context():
    async def handler(request):
        return web.json_response({"name": "tabs.mute", "utterance": "mute tab",
                                  "slots": {}, "parameters": {}})

    ctx, received = serve_and_parse(handler, "mute tab")
    assert ctx.utterance == "mute tab"
    assert ctx.extra == {"name": "tabs.mute"}
    assert received == [{"type": "parseUtterance", "utterance": "mute tab",
                         "disableFallback": True}]

def test_null_answer_is_not_parsed():
    async def handler(request):
        return web.json_response(None)

    ctx, _ = serve_and_parse(handler, "fly me to the moon")
    assert ctx is None

def test_empty_answer_is_not_parsed():
    async def handler(request):
        return web.Response(status=200)

    ctx, _ = serve_and_parse(handler, "hum a tune")
    assert ctx is None

def test_not_found_is_not_parsed():
    async def handler(request):
        return web.Response(status=404)

    ctx, _ = serve_and_parse(handler, "hum a tune")
    assert ctx is None

def test_unprocessable_is_not_parsed():
    async def handler(request):
        return web.Response(status=422)

    ctx, _ = serve_and_parse(handler, "hum a tune")
    assert ctx is None

def test_server_error_raises():
    async def handler(request):
        return web.Response(status=500)

    with pytest.raises(aiohttp.ClientResponseError):
        serve_and_parse(handler, "mute tab")

def test_zero_retries_still_sends_once():
    async def handler(request):
        return web.json_response({"utterance": "mute tab"})

    ctx, received = serve_and_parse(handler, "mute tab", max_retries=0)
    assert ctx.utterance == "mute tab"
    assert len(received) == 1


class FlakySession:
    """Refuses the first connection, then forwards to a real session."""

    def __init__(self, session):
        self.session = session
        self.attempts = 0
        self.closed = False

    def post(self, url, **kwargs):
        self.attempts += 1
        if self.attempts == 1:
            raise aiohttp.ClientConnectionError("connection refused")
        return self.session.post(url, **kwargs)


def test_connection_errors_are_retried():
    received = []

    async def endpoint(request):
        received.append(await request.json())
        return web.json_response({"utterance": "mute tab"})

    async def main():
        app = web.Application()
        app.router.add_post("/message", endpoint)
        async with test_utils.TestServer(app) as server:
            async with aiohttp.ClientSession() as session:
                flaky = FlakySession(session)
                parser = CommandParser(str(server.make_url("/")), endpoint="/message",
                                       max_retries=3, backoff_factor=0)
                parser.session = flaky
                ctx = await parser.parse("mute tab")
                return ctx, flaky.attempts

    ctx, attempts = asyncio.run(main())
    assert ctx.utterance == "mute tab"
    assert attempts == 2
    assert len(received) == 1
