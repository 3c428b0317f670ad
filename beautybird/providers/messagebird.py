"""
MessageBird REST client for number lookups and scheduled SMS.

Only the two calls the booking flow needs are implemented. Any non-2xx
answer or transport problem surfaces as ``ProviderError`` carrying the
MessageBird error code when the response has one.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol
from urllib.parse import quote

import httpx

from beautybird.config import MessagingConfig
from beautybird.logging_context import mask_phone

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://rest.messagebird.com"

# MessageBird answers a lookup for a number it cannot parse with this code.
UNKNOWN_FORMAT_CODE = 21


class ProviderError(Exception):
    """Raised when MessageBird rejects a request or cannot be reached."""

    def __init__(self, code: Optional[int], description: str, status_code: Optional[int] = None):
        super().__init__(f"[{code}] {description}" if code is not None else description)
        self.code = code
        self.description = description
        self.status_code = status_code

    @property
    def is_unknown_format(self) -> bool:
        return self.code == UNKNOWN_FORMAT_CODE


@dataclass(frozen=True)
class LookupResult:
    """Subset of a lookup response used for verification."""
    phone_number: str
    line_type: str


class MessagingProvider(Protocol):
    """Operations the verifier and reminder scheduler depend on."""

    async def lookup(self, number: str, country_code: Optional[str] = None) -> LookupResult:
        ...

    async def create_scheduled_message(
        self,
        originator: str,
        recipients: list[str],
        scheduled_datetime: str,
        body: str,
    ) -> Optional[str]:
        ...


def _parse_error(response: httpx.Response) -> ProviderError:
    try:
        payload = response.json()
        first = payload["errors"][0]
        return ProviderError(
            first.get("code"),
            first.get("description", "Unknown error"),
            status_code=response.status_code,
        )
    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
        return ProviderError(
            None, f"HTTP {response.status_code} from MessageBird", status_code=response.status_code
        )


def _normalized_number(payload: dict[str, Any]) -> str:
    e164 = (payload.get("formats") or {}).get("e164")
    if e164:
        return str(e164)
    raw = str(payload.get("phoneNumber", ""))
    return raw if raw.startswith("+") else f"+{raw}"


class MessageBirdClient:
    """Async MessageBird client. Use as an async context manager or call ``aclose()``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not api_key:
            logger.warning("MessageBird client created without an API key")
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"AccessKey {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: MessagingConfig) -> "MessageBirdClient":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_sec,
        )

    async def __aenter__(self) -> "MessageBirdClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self, method: str, operation: str, path: str, **kwargs: Any
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("MessageBird %s failed: %s", operation, e)
            raise ProviderError(None, str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            error = _parse_error(response)
            logger.warning(
                "MessageBird %s returned HTTP %d: %s",
                operation, response.status_code, error,
            )
            raise error

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(None, "Malformed JSON from MessageBird") from e

    async def lookup(self, number: str, country_code: Optional[str] = None) -> LookupResult:
        """Look up a number; ``country_code`` disambiguates local formats."""
        params = {"countryCode": country_code} if country_code else None
        logger.debug("Looking up %s (country hint %s)", mask_phone(number), country_code)
        payload = await self._request(
            "GET", "lookup", f"/lookup/{quote(number, safe='+')}", params=params
        )
        return LookupResult(
            phone_number=_normalized_number(payload),
            line_type=str(payload.get("type", "unknown")),
        )

    async def create_scheduled_message(
        self,
        originator: str,
        recipients: list[str],
        scheduled_datetime: str,
        body: str,
    ) -> Optional[str]:
        """Schedule an SMS and return the provider message id."""
        payload = await self._request(
            "POST",
            "messages",
            "/messages",
            json={
                "originator": originator,
                "recipients": recipients,
                "scheduledDatetime": scheduled_datetime,
                "body": body,
            },
        )
        message_id = payload.get("id")
        logger.info("Scheduled message %s for %s", message_id, scheduled_datetime)
        return message_id
