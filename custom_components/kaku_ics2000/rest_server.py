"""Administrative REST server for the ICS-2000 integration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aiohttp import web

from .errors import KakuError
from .light import brightness_to_hub

if TYPE_CHECKING:
    from .orchestrator import KakuSyncOrchestrator

_LOGGER = logging.getLogger(__name__)


class AdminServer:
    """Small HTTP API to inspect and control hub entities.

    Routes:
        GET  /entities
        GET  /entities/{entity_id}/status
        POST /entities/{entity_id}/on
        POST /entities/{entity_id}/off
        POST /entities/{entity_id}/dim/{level}   (level 0..255)
        POST /scenes/{entity_id}/run
        POST /reload
    """

    def __init__(self, orchestrator: KakuSyncOrchestrator) -> None:
        """Initialize server."""
        self._orchestrator = orchestrator
        self._runner: web.AppRunner | None = None
        self.app = web.Application()
        self.app.add_routes(
            [
                web.get("/entities", self._handle_list),
                web.get("/entities/{entity_id}/status", self._handle_status),
                web.post("/entities/{entity_id}/on", self._handle_on),
                web.post("/entities/{entity_id}/off", self._handle_off),
                web.post("/entities/{entity_id}/dim/{level}", self._handle_dim),
                web.post("/scenes/{entity_id}/run", self._handle_run_scene),
                web.post("/reload", self._handle_reload),
            ]
        )

    @property
    def is_running(self) -> bool:
        """Return whether the server is listening."""
        return self._runner is not None

    async def async_start(self, port: int) -> None:
        """Start listening on all interfaces."""
        runner = web.AppRunner(self.app)
        await runner.setup()
        try:
            await web.TCPSite(runner, port=port).start()
        except OSError:
            await runner.cleanup()
            raise
        self._runner = runner

    async def async_stop(self) -> None:
        """Stop listening."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None

    # ─────────────────────────────────────────────────────────────
    # HANDLERS
    # ─────────────────────────────────────────────────────────────

    async def _handle_list(self, request: web.Request) -> web.Response:
        return web.json_response(
            [entity.to_dict() for entity in self._orchestrator.entities.values()]
        )

    async def _handle_status(self, request: web.Request) -> web.Response:
        entity = self._get_entity(request)
        return web.json_response(
            {
                "entity_id": entity["entity_id"],
                "status": self._orchestrator.hub.get_status(entity["entity_id"]),
            }
        )

    async def _handle_on(self, request: web.Request) -> web.Response:
        return await self._async_command(request, "on_off", 1)

    async def _handle_off(self, request: web.Request) -> web.Response:
        return await self._async_command(request, "on_off", 0)

    async def _handle_dim(self, request: web.Request) -> web.Response:
        try:
            level = int(request.match_info["level"])
        except ValueError:
            raise web.HTTPBadRequest(reason="level must be an integer") from None
        return await self._async_command(request, "dim", brightness_to_hub(level))

    async def _handle_run_scene(self, request: web.Request) -> web.Response:
        entity = self._get_entity(request)
        try:
            await self._orchestrator.hub.async_run_scene(entity["entity_id"])
        except KakuError as err:
            raise web.HTTPBadGateway(reason=str(err)) from err
        return web.json_response({"success": True})

    async def _handle_reload(self, request: web.Request) -> web.Response:
        success = await self._orchestrator.async_reload()
        return web.json_response({"success": success})

    async def _async_command(
        self, request: web.Request, function_name: str, value: int
    ) -> web.Response:
        entity = self._get_entity(request)
        function = entity["functions"][function_name]
        if function is None:
            raise web.HTTPBadRequest(
                reason=f"{entity['name']} does not support {function_name}"
            )
        try:
            await self._orchestrator.hub.async_send_command(
                entity["entity_id"], function, value, entity["is_group"]
            )
        except KakuError as err:
            raise web.HTTPBadGateway(reason=str(err)) from err
        return web.json_response({"success": True})

    def _get_entity(self, request: web.Request) -> dict[str, Any]:
        try:
            entity_id = int(request.match_info["entity_id"])
        except ValueError:
            raise web.HTTPBadRequest(reason="entity_id must be an integer") from None
        entity = self._orchestrator.entities.get(entity_id)
        if entity is None:
            raise web.HTTPNotFound(reason=f"Unknown entity {entity_id}")
        return entity.to_dict()
