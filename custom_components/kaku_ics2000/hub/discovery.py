"""Local network discovery of the ICS-2000 hub."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import logging
from typing import Any

from ..const import DEFAULT_DISCOVER_MESSAGE, DISCOVERY_PORT
from ..errors import DiscoveryTimeout

_LOGGER = logging.getLogger(__name__)

type DiscoveryProbe = Callable[[str], Awaitable[str]]


@dataclass(frozen=True)
class DiscoveryResult:
    """Outcome of a discovery run."""

    address: str
    used_backup_address: bool = False


class _ProbeProtocol(asyncio.DatagramProtocol):
    """Resolve a future with the address of the first datagram received."""

    def __init__(self, answered: asyncio.Future[str]) -> None:
        self._answered = answered

    def datagram_received(self, data: bytes, addr: tuple[str | Any, int]) -> None:
        if not self._answered.done():
            self._answered.set_result(addr[0])

    def error_received(self, exc: Exception) -> None:
        _LOGGER.debug("Discovery socket error: %s", exc)


def encode_discover_message(message: str) -> bytes:
    """Encode a discover message; hex strings are sent as raw bytes."""
    try:
        return bytes.fromhex(message)
    except ValueError:
        return message.encode()


async def async_udp_probe(
    message: str,
    broadcast_address: str = "255.255.255.255",
    port: int = DISCOVERY_PORT,
) -> str:
    """Broadcast a discover message and wait for the hub to answer.

    Waits indefinitely; callers bound it with a timeout.
    """
    loop = asyncio.get_running_loop()
    answered: asyncio.Future[str] = loop.create_future()
    transport, _ = await loop.create_datagram_endpoint(
        lambda: _ProbeProtocol(answered),
        local_addr=("0.0.0.0", 0),
        allow_broadcast=True,
    )
    try:
        transport.sendto(encode_discover_message(message), (broadcast_address, port))
        return await answered
    finally:
        transport.close()


class DiscoveryCoordinator:
    """Find the hub address, falling back to a configured backup address."""

    def __init__(
        self,
        backup_address: str | None = None,
        probe: DiscoveryProbe = async_udp_probe,
        default_message: str = DEFAULT_DISCOVER_MESSAGE,
    ) -> None:
        """Initialize coordinator."""
        self._backup_address = backup_address
        self._probe = probe
        self._default_message = default_message

    async def async_discover(
        self, timeout: float, discover_message: str | None = None
    ) -> DiscoveryResult:
        """Probe for the hub for at most `timeout` seconds.

        Raises DiscoveryTimeout when the hub stays silent and no backup
        address is configured.
        """
        message = discover_message or self._default_message
        try:
            async with asyncio.timeout(timeout):
                address = await self._probe(message)
        except TimeoutError:
            if self._backup_address:
                _LOGGER.debug(
                    "Discovery timed out after %ss, using backup address %s",
                    timeout,
                    self._backup_address,
                )
                return DiscoveryResult(self._backup_address, used_backup_address=True)
            raise DiscoveryTimeout(timeout) from None

        return DiscoveryResult(address)
