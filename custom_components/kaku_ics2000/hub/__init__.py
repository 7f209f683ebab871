"""Hub sessions and discovery for the ICS-2000 integration."""

from __future__ import annotations

from .base import Hub
from .cloud import CloudHub
from .discovery import DiscoveryCoordinator, DiscoveryResult, async_udp_probe

__all__ = [
    "CloudHub",
    "DiscoveryCoordinator",
    "DiscoveryResult",
    "Hub",
    "async_udp_probe",
]
