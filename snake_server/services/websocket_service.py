# snake_server/services/websocket_service.py
"""WebSocket connection management and message handling."""

import asyncio
import json
from typing import Dict, Optional, Set

from fastapi import WebSocket, WebSocketDisconnect

from snake_server.config.settings import TICK_RATE
from snake_server.models.commands import HelloCommand, StartCommand, parse_command
from snake_server.services.game_service import GameService
from snake_server.utils.logger import get_logger

logger = get_logger(__name__)


class WebSocketService:
    """Manages WebSocket connections, the tick loop and state fan-out."""

    def __init__(self, game_service: GameService, tick_rate: float = TICK_RATE):
        self.game_service = game_service
        self.tick_rate = tick_rate
        self.connected_clients: Set[WebSocket] = set()
        self.websocket_to_player: Dict[WebSocket, str] = {}
        self._tick_task: Optional[asyncio.Task] = None

    def start_background_tasks(self):
        """Start the fixed-rate tick loop."""
        if not self._tick_task:
            self._tick_task = asyncio.create_task(self._tick_loop())

    async def stop_background_tasks(self):
        if self._tick_task:
            self._tick_task.cancel()
            try:
                await self._tick_task
            except asyncio.CancelledError:
                pass
            self._tick_task = None

    async def _tick_loop(self):
        """Background task that steps the game and pushes a snapshot each tick."""
        while True:
            await asyncio.sleep(1 / self.tick_rate)
            try:
                self.game_service.tick()
                if self.connected_clients:
                    await self.broadcast_state()
            except Exception:
                logger.exception("Tick failed")

    async def broadcast_state(self):
        message = {"type": "state", **self.game_service.build_state()}
        await self._broadcast_message(message)

    async def handle_connection(self, websocket: WebSocket):
        """Handle a WebSocket connection until the client goes away."""
        await websocket.accept()
        logger.info("WebSocket connection accepted for %s", websocket.client)
        self.connected_clients.add(websocket)

        try:
            await self._handle_client_messages(websocket)
        except WebSocketDisconnect:
            pass
        finally:
            self._handle_disconnect(websocket)

    async def _handle_client_messages(self, websocket: WebSocket):
        """Handle incoming messages from a client."""
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                logger.debug("Dropping binary frame from %s", websocket.client)
                continue
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug("Dropping malformed message from %s", websocket.client)
                continue
            await self._process_message(websocket, data)

    async def _process_message(self, websocket: WebSocket, data):
        """Process a single message from a client."""
        command = parse_command(data)
        if command is None:
            return

        player_id = self.websocket_to_player.get(websocket)
        if isinstance(command, HelloCommand):
            if player_id is None:
                await self._handle_hello(websocket, command)
            return
        if player_id is None:
            return

        applied = self.game_service.handle_command(player_id, command)
        if applied and isinstance(command, StartCommand):
            await self.broadcast_state()

    async def _handle_hello(self, websocket: WebSocket, command: HelloCommand):
        """Register the player and acknowledge with its assigned identity."""
        player = self.game_service.create_player(command.name)
        self.websocket_to_player[websocket] = player.id
        await websocket.send_json(
            {"type": "hello_ack", **self.game_service.build_join_ack(player)}
        )

    def _handle_disconnect(self, websocket: WebSocket):
        """Handle client disconnection."""
        self.connected_clients.discard(websocket)
        player_id = self.websocket_to_player.pop(websocket, None)
        if player_id is not None:
            self.game_service.remove_player(player_id)

    async def _broadcast_message(self, message: dict):
        """Broadcast a message to all connected clients."""
        disconnected = set()

        for client in list(self.connected_clients):
            try:
                await client.send_json(message)
            except Exception as exc:
                logger.warning("Send to %s failed: %s", client.client, exc)
                disconnected.add(client)

        for client in disconnected:
            self._handle_disconnect(client)
