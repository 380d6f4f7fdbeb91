"""HTTP client for the text-completion chat endpoint."""

import logging

import httpx
from pydantic import ValidationError

from chatwidget.messages import FALLBACK_REPLY
from chatwidget.schemas import ChatRequest, CompletionResponse

logger = logging.getLogger(__name__)


class RateLimitedError(Exception):
    """The chat endpoint answered 429."""


class ServerError(Exception):
    """The chat endpoint answered with a non-2xx status other than 429."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Chat endpoint returned status {status_code}")
        self.status_code = status_code


class ChatNetworkError(Exception):
    """The request never produced a usable response."""


def extract_reply(data: object) -> str:
    """Return ``choices[0].message.content`` or the fallback reply.

    A body that does not have the expected shape is degraded to a
    placeholder rather than treated as an error.
    """
    try:
        parsed = CompletionResponse.model_validate(data)
    except ValidationError:
        logger.warning("Unexpected completion body, using fallback reply")
        return FALLBACK_REPLY

    if not parsed.choices or parsed.choices[0].message is None:
        return FALLBACK_REPLY
    return parsed.choices[0].message.content or FALLBACK_REPLY


class ChatClient:
    """Send a transcript to the chat endpoint and return the reply text."""

    def __init__(
        self,
        api_url: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_url: Chat endpoint, either the backend host or the proxy.
            http_client: Optional shared client; one is created (and owned)
                when omitted.
        """
        self.api_url = api_url
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=None)

    async def complete(self, messages: list[dict]) -> str:
        """POST ``{"messages": [...]}`` and return the assistant reply.

        Args:
            messages: Role/content dicts, oldest first.

        Returns:
            The reply text, or the fallback reply for a malformed body.

        Raises:
            RateLimitedError: On HTTP 429.
            ServerError: On any other non-2xx status.
            ChatNetworkError: On transport failure or an undecodable body.
        """
        payload = ChatRequest.model_validate({"messages": messages})

        try:
            response = await self._http.post(
                self.api_url,
                json=payload.model_dump(),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise ChatNetworkError(f"Request to {self.api_url} failed: {e}") from e

        if response.status_code == 429:
            raise RateLimitedError("Rate limit exceeded")
        if not response.is_success:
            raise ServerError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ChatNetworkError(f"Response body is not valid JSON: {e}") from e

        return extract_reply(data)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
