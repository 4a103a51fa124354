"""Discord REST transport used by interactions and messages."""

import logging
import os
from typing import TYPE_CHECKING, Any

import httpx

from discord_menus import __version__
from discord_menus.events import ErrorCode, EventChannel, EventType

if TYPE_CHECKING:
    from discord_menus.config import Config

logger = logging.getLogger(__name__)


def interaction_callback_path(interaction_id: str, interaction_token: str) -> str:
    return f"/interactions/{interaction_id}/{interaction_token}/callback"


def channel_messages_path(channel_id: str | int) -> str:
    return f"/channels/{channel_id}/messages"


def channel_message_path(channel_id: str | int, message_id: str | int) -> str:
    return f"/channels/{channel_id}/messages/{message_id}"


def _expand_env(value: Any) -> Any:
    """Resolve ``${ENV_VAR}`` references in string config values."""
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        return os.environ.get(value[2:-1])
    return value


class RestClient:
    """Async client for the Discord REST API.

    The client holds no credentials; every call carries the bot token it
    should be authorized with, so one RestClient can be shared by all
    interaction and message objects.

    Args:
        base_url: API root without version (default: https://discord.com/api)
        api_version: API version segment
        timeout: Request timeout in seconds
        user_agent: User-Agent header value
        transport: Optional httpx transport, mostly useful for tests
    """

    DEFAULT_BASE_URL = "https://discord.com/api"
    DEFAULT_API_VERSION = 9
    DEFAULT_USER_AGENT = f"DiscordBot (discord-menus, {__version__})"

    def __init__(
        self,
        base_url: str | None = None,
        api_version: int = DEFAULT_API_VERSION,
        timeout: float = 30.0,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self.user_agent = user_agent or self.DEFAULT_USER_AGENT
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: "Config") -> "RestClient":
        """Create client from Config object.

        Reads from [api] section:
            base_url: API root (supports ${ENV_VAR})
            version: API version
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
        """
        client = cls()
        client._apply(config.get("api", default={}))
        return client

    def _apply(self, api_config: dict[str, Any]) -> None:
        self.base_url = (
            _expand_env(api_config.get("base_url")) or self.DEFAULT_BASE_URL
        ).rstrip("/")
        self.api_version = int(api_config.get("version", self.DEFAULT_API_VERSION))
        self.timeout = float(api_config.get("timeout", 30.0))
        self.user_agent = _expand_env(api_config.get("user_agent")) or self.DEFAULT_USER_AGENT

    async def on_config_change(self, new_config: dict[str, Any]) -> None:
        """Config change callback: apply the new [api] section.

        The pooled HTTP client is closed so the next request picks up the
        new settings.
        """
        self._apply(new_config.get("api", {}))
        await self.close()
        logger.info("REST client reconfigured for %s", self.api_url)

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/v{self.api_version}"

    async def __aenter__(self) -> "RestClient":
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={"User-Agent": self.user_agent},
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        token: str | None,
        payload: dict[str, Any] | None = None,
    ) -> httpx.Response | None:
        """Send one request.

        Nothing is retried. Network level failures are logged and reported
        as ``None`` rather than raised.

        Args:
            method: HTTP method
            path: API path (without base URL)
            token: Bot token for the Authorization header
            payload: Optional JSON body

        Returns:
            The response, or None if no response was received
        """
        client = await self._ensure_client()
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bot {token}"

        try:
            response = await client.request(method, path, json=payload, headers=headers)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            return None

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return response


async def send_and_report(
    http: RestClient,
    events: EventChannel,
    token: str | None,
    method: str,
    path: str,
    payload: dict[str, Any] | None = None,
    *,
    error: ErrorCode = ErrorCode.POST_ERROR,
    expected_status: int | None = None,
) -> httpx.Response | None:
    """Send a request and publish ERROR if it did not succeed.

    Args:
        expected_status: Exact status that counts as success; any 2xx if None
        error: Code published on failure

    Returns:
        The response on success, otherwise None
    """
    response = await http.request(method, path, token, payload)

    if response is None:
        ok = False
    elif expected_status is None:
        ok = response.is_success
    else:
        ok = response.status_code == expected_status

    if not ok:
        status = response.status_code if response is not None else "no response"
        logger.warning("%s %s unsuccessful (%s), publishing %s", method, path, status, error.value)
        await events.emit(EventType.ERROR, error)
        return None

    return response
