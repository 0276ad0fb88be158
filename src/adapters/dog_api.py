"""dog.ceo API adapter.

Implementation:
- Turns a breed (optionally `breed/sub-breed`) into a safe URL path.
- One GET per image; the JSON body is validated with `BreedImageResponse`.

Notes:
- 2xx + status "success" => `message` is the image URL
- anything else => `FetchError` (the API error message is kept when present)
"""

from __future__ import annotations

import asyncio
import logging
import re
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from core.domain.errors import BatchFetchError, FetchError, InvalidBreedError
from core.domain.models import BreedImageResponse
from core.domain.policy import BreedPolicy
from core.interfaces.stages import ImageFetcher

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://dog.ceo/api"

_SAFE_SEGMENT = re.compile(r"[A-Za-z0-9_-]+")
_MAX_SEGMENTS = 2  # breed + sub-breed


def breed_path(breed: str, policy: BreedPolicy = BreedPolicy.ENCODE) -> str:
    """Return the URL path fragment for `breed` according to `policy`."""

    value = breed.strip()
    if not value:
        raise InvalidBreedError("Breed name is empty")

    segments = value.split("/")
    if len(segments) > _MAX_SEGMENTS:
        raise InvalidBreedError(f"Too many path segments in breed {value!r}")

    out: list[str] = []
    for segment in segments:
        if segment in ("", ".", ".."):
            raise InvalidBreedError(f"Invalid path segment in breed {value!r}")
        if policy is BreedPolicy.REJECT:
            if not _SAFE_SEGMENT.fullmatch(segment):
                raise InvalidBreedError(f"Breed {value!r} contains unsupported characters")
            out.append(segment)
        else:
            out.append(quote(segment, safe=""))
    return "/".join(out)


def build_breed_image_url(
    breed: str,
    *,
    base_url: str = DEFAULT_BASE_URL,
    policy: BreedPolicy = BreedPolicy.ENCODE,
) -> str:
    return f"{base_url.rstrip('/')}/breed/{breed_path(breed, policy)}/images/random"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = BreedImageResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return response.reason_phrase or "no details"
    return body.message


class DogApiFetcher(ImageFetcher):
    """Fetches random breed images through a borrowed `httpx.AsyncClient`."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str = DEFAULT_BASE_URL,
        policy: BreedPolicy = BreedPolicy.ENCODE,
        max_concurrency: int = 3,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._policy = policy
        self._max_concurrency = max(1, max_concurrency)

    def url_for(self, breed: str) -> str:
        return build_breed_image_url(breed, base_url=self._base_url, policy=self._policy)

    async def fetch_image_url(self, breed: str) -> str:
        url = self.url_for(breed)
        logger.debug("GET %s", url)

        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"Request to {url} failed: {exc}") from exc

        logger.debug("GET %s -> HTTP %s", url, response.status_code)
        if not response.is_success:
            raise FetchError(
                f"HTTP {response.status_code} from {url}: {_error_detail(response)}"
            )

        try:
            body = BreedImageResponse.model_validate(response.json())
        except ValueError as exc:
            # ValidationError is a ValueError too (missing `message`, bad JSON).
            raise FetchError(f"Malformed response from {url}: {exc}") from exc

        if not body.ok:
            raise FetchError(f"API error from {url}: {body.message}")
        return body.message

    async def fetch_many(self, breed: str, count: int) -> list[str]:
        """Fetch `count` images concurrently; all must succeed.

        The batch fails as one: every underlying failure is collected into a
        single `BatchFetchError`.
        """

        if count < 1:
            raise FetchError(f"Image count must be at least 1, got {count}")
        # Validate once up front so a bad breed is reported a single time.
        self.url_for(breed)

        sem = asyncio.Semaphore(self._max_concurrency)

        async def fetch_one() -> str:
            async with sem:
                return await self.fetch_image_url(breed)

        results = await asyncio.gather(
            *(fetch_one() for _ in range(count)),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            raise BatchFetchError(errors, total=count)
        return [r for r in results if isinstance(r, str)]
