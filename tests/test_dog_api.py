"""Fetcher tests: URL building, response handling, batch semantics."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from adapters.dog_api import DogApiFetcher, breed_path, build_breed_image_url
from adapters.http_client import build_async_client
from conftest import RecordingTransport
from core.config import AppSettings
from core.domain.errors import BatchFetchError, FetchError, InvalidBreedError
from core.domain.policy import BreedPolicy


async def _fetch(transport: httpx.AsyncBaseTransport, breed: str = "hound", **kwargs) -> str:
    async with build_async_client(AppSettings(), transport=transport) as client:
        return await DogApiFetcher(client, **kwargs).fetch_image_url(breed)


async def _fetch_many(transport: httpx.AsyncBaseTransport, count: int, **kwargs) -> list[str]:
    async with build_async_client(AppSettings(), transport=transport) as client:
        return await DogApiFetcher(client, **kwargs).fetch_many("hound", count)


def test_url_for_hound_is_exact():
    assert build_breed_image_url("hound") == "https://dog.ceo/api/breed/hound/images/random"


def test_url_uses_custom_base_url_without_double_slash():
    url = build_breed_image_url("hound", base_url="http://localhost:8080/api/")
    assert url == "http://localhost:8080/api/breed/hound/images/random"


def test_breed_is_stripped_and_sub_breed_kept():
    assert breed_path("hound\n") == "hound"
    assert breed_path("hound/afghan") == "hound/afghan"


def test_encode_policy_percent_encodes_each_segment():
    assert breed_path("st bernard") == "st%20bernard"
    assert breed_path("a?b#c") == "a%3Fb%23c"


def test_reject_policy_refuses_unsafe_characters():
    with pytest.raises(InvalidBreedError):
        breed_path("st bernard", BreedPolicy.REJECT)
    assert breed_path("german-shepherd", BreedPolicy.REJECT) == "german-shepherd"


@pytest.mark.parametrize("breed", ["", "   ", "a/b/c", "../admin", "hound/", "/hound"])
def test_invalid_breeds_are_rejected_by_both_policies(breed):
    for policy in BreedPolicy:
        with pytest.raises(InvalidBreedError):
            breed_path(breed, policy)


def test_fetch_returns_message_and_requests_exact_url(transport):
    url = asyncio.run(_fetch(transport))

    assert url == "https://images.dog.ceo/breeds/hound-afghan/n02088094_1003.jpg"
    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "GET"
    assert str(request.url) == "https://dog.ceo/api/breed/hound/images/random"
    assert request.headers["accept"] == "application/json"


def test_non_2xx_raises_fetch_error_with_api_message():
    transport = RecordingTransport(
        status_code=404,
        payload={"status": "error", "message": "Breed not found (main breed does not exist)", "code": 404},
    )
    with pytest.raises(FetchError) as info:
        asyncio.run(_fetch(transport, "unicorn"))
    assert "404" in str(info.value)
    assert "Breed not found" in str(info.value)


def test_missing_message_raises_fetch_error():
    transport = RecordingTransport(payload={"status": "success"})
    with pytest.raises(FetchError, match="Malformed response"):
        asyncio.run(_fetch(transport))


def test_non_json_body_raises_fetch_error():
    transport = RecordingTransport(content=b"<html>oops</html>")
    with pytest.raises(FetchError, match="Malformed response"):
        asyncio.run(_fetch(transport))


def test_error_status_in_2xx_body_raises_fetch_error():
    transport = RecordingTransport(payload={"status": "error", "message": "nope"})
    with pytest.raises(FetchError, match="nope"):
        asyncio.run(_fetch(transport))


def test_transport_failure_raises_fetch_error():
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError, match="connection refused"):
        asyncio.run(_fetch(httpx.MockTransport(boom)))


def test_invalid_breed_never_reaches_the_network(transport):
    with pytest.raises(InvalidBreedError):
        asyncio.run(_fetch(transport, "st bernard", policy=BreedPolicy.REJECT))
    assert transport.requests == []


def test_fetch_many_issues_count_requests(transport):
    urls = asyncio.run(_fetch_many(transport, 3))

    assert len(urls) == 3
    assert len(transport.requests) == 3


def test_fetch_many_fails_as_one_when_any_request_fails():
    calls = {"n": 0}

    def flaky(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 2:
            return httpx.Response(500, json={"status": "error", "message": "server down"})
        return httpx.Response(200, json={"status": "success", "message": "https://images.dog.ceo/ok.jpg"})

    with pytest.raises(BatchFetchError) as info:
        asyncio.run(_fetch_many(httpx.MockTransport(flaky), 3))

    assert info.value.total == 3
    assert len(info.value.errors) == 1
    assert "server down" in str(info.value)


def test_fetch_many_respects_max_concurrency():
    state = {"active": 0, "peak": 0}

    async def slow(request: httpx.Request) -> httpx.Response:
        state["active"] += 1
        state["peak"] = max(state["peak"], state["active"])
        await asyncio.sleep(0.01)
        state["active"] -= 1
        return httpx.Response(200, json={"status": "success", "message": "https://images.dog.ceo/ok.jpg"})

    asyncio.run(_fetch_many(httpx.MockTransport(slow), 6, max_concurrency=2))

    assert state["peak"] == 2


def test_fetch_many_rejects_zero_count(transport):
    with pytest.raises(FetchError):
        asyncio.run(_fetch_many(transport, 0))
