"""
HTTP clients for the Hero Directory Service.

Two thin clients share one httpx transport setup:
- HeroDirectoryClient: GET/POST /superheroes
- ScoreSuggestionClient: POST /suggest-score

Clients raise; HeroDirectory (the per-session collection holder) and the UI
catch, log, and keep whatever they had before.
"""

import logging
from typing import Any, List, Optional

import httpx

try:
    from .heroes import Hero
except ImportError:
    from heroes import Hero  # type: ignore

logger = logging.getLogger(__name__)


class HeroDirectoryError(Exception):
    """Base exception for directory service errors."""

    pass


class ServiceUnavailableError(HeroDirectoryError):
    """Raised on transport failures, timeouts and non-2xx responses."""

    pass


class MalformedResponseError(HeroDirectoryError):
    """Raised when the response body is not the JSON shape we expect."""

    pass


class _ServiceClient:
    """
    Shared httpx plumbing for the directory endpoints.

    Args:
        base_url: Service root, e.g. https://superhero-backend-nu.vercel.app
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(self, method: str, path: str, payload: Any = None) -> httpx.Response:
        try:
            response = self._client.request(method, path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ServiceUnavailableError(
                f"{method} {path} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ServiceUnavailableError(f"{method} {path} failed: {e}") from e
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Invalid JSON from {response.request.method} {response.request.url.path}: {e}"
            ) from e


class HeroDirectoryClient(_ServiceClient):
    """List and create heroes."""

    def list_heroes(self) -> List[Hero]:
        data = self._json(self._request("GET", "/superheroes"))
        if not isinstance(data, list):
            raise MalformedResponseError(
                f"Expected a JSON array of heroes, got {type(data).__name__}"
            )
        try:
            heroes = [Hero.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise MalformedResponseError(f"Malformed hero record: {e}") from e
        logger.debug(f"Fetched {len(heroes)} heroes from {self.base_url}")
        return heroes

    def create_hero(self, hero: Hero) -> None:
        # The response body is not used; callers refresh the whole collection.
        self._request("POST", "/superheroes", hero.to_payload())
        logger.info(f"Created hero {hero.name!r} ({hero.superpower})")


class ScoreSuggestionClient(_ServiceClient):
    """Ask the service for a humility score matching a superpower."""

    def suggest_score(self, superpower: str) -> float:
        data = self._json(
            self._request("POST", "/suggest-score", {"superpower": superpower})
        )
        try:
            score = float(data["score"])
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(
                f"Expected {{'score': number}} from /suggest-score, got {data!r}"
            ) from e
        return round(score, 1)


class SuggestionSequencer:
    """
    Tickets for score-suggestion requests.

    Every keystroke dispatches a request with the next ticket; a response is
    applied only when its ticket is still the latest dispatched, so a slow
    response for "fl" cannot overwrite the score for "flying".
    """

    def __init__(self) -> None:
        self._latest = 0

    def dispatch(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest

    @property
    def latest(self) -> int:
        return self._latest


class HeroDirectory:
    """
    Last fetched hero collection plus the operations that replace it.

    The collection is only ever replaced wholesale. On failure the previous
    collection is kept and the error is logged; `last_error` holds a short
    message for the UI status line.
    """

    def __init__(
        self, client: HeroDirectoryClient, heroes: Optional[List[Hero]] = None
    ) -> None:
        self.client = client
        self.heroes: List[Hero] = list(heroes or [])
        self.last_error: Optional[str] = None

    def refresh(self) -> List[Hero]:
        try:
            self.heroes = self.client.list_heroes()
            self.last_error = None
        except HeroDirectoryError as e:
            logger.error(f"Error fetching heroes: {e}")
            self.last_error = f"Could not load heroes: {e}"
        return self.heroes

    def add(self, hero: Hero) -> bool:
        """Create `hero` and refresh. Returns False (collection untouched) on failure."""
        try:
            self.client.create_hero(hero)
        except HeroDirectoryError as e:
            logger.error(f"Error adding hero: {e}")
            self.last_error = f"Could not add {hero.name}: {e}"
            return False
        self.refresh()
        return True
