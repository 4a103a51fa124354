"""Raw gateway event source consumed by the dispatcher."""

import json
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

import discord

logger = logging.getLogger(__name__)

RawHandler = Callable[[dict[str, Any]], Awaitable[None]]

DISPATCH_OPCODE = 0


@runtime_checkable
class GatewayClient(Protocol):
    """What the dispatcher needs from a chat gateway connection."""

    @property
    def token(self) -> str | None: ...

    def on_raw(self, event: str, handler: RawHandler) -> None: ...


class DiscordGateway:
    """Expose a py-cord client's raw dispatch events.

    Listens to ``on_socket_raw_receive``, which py-cord only dispatches when
    the client was created with ``enable_debug_events=True``.
    """

    def __init__(self, client: discord.Client):
        self.client = client
        self._handlers: dict[str, list[RawHandler]] = defaultdict(list)
        if not getattr(client, "_enable_debug_events", True):
            logger.warning(
                "Client created without enable_debug_events=True; "
                "interaction events will not be received"
            )
        client.add_listener(self._on_socket_raw_receive, "on_socket_raw_receive")

    @property
    def token(self) -> str | None:
        """Bot token of the logged in client."""
        return getattr(self.client.http, "token", None)

    def on_raw(self, event: str, handler: RawHandler) -> None:
        self._handlers[event].append(handler)

    async def _on_socket_raw_receive(self, msg: str | bytes) -> None:
        try:
            packet = json.loads(msg)
        except (TypeError, ValueError, UnicodeDecodeError):
            logger.debug("Skipping undecodable gateway frame")
            return

        if not isinstance(packet, dict) or packet.get("op") != DISPATCH_OPCODE:
            return

        for handler in self._handlers.get(packet.get("t"), []):
            await handler(packet.get("d") or {})
