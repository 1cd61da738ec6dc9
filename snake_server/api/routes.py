# snake_server/api/routes.py
"""API routes for the game server."""

from fastapi import APIRouter

from snake_server.config.settings import get_game_config
from snake_server.services.game_service import GameService


class GameAPI:
    """API routes for game-related endpoints."""

    def __init__(self, game_service: GameService):
        self.game_service = game_service
        self.router = APIRouter()
        self._setup_routes()

    def _setup_routes(self):
        """Set up all API routes."""

        @self.router.get("/")
        async def root():
            """Root endpoint."""
            return {"message": "Snake Server Running"}

        @self.router.get("/api/game/config")
        async def get_game_config_endpoint():
            """Get game configuration including grid size, speeds and palette."""
            return get_game_config()

        @self.router.get("/api/game/state")
        async def get_state():
            """Get the same snapshot pushed to WebSocket clients."""
            return self.game_service.build_state()

        @self.router.get("/api/game/stats")
        async def get_game_stats():
            """Get game statistics."""
            return self.game_service.get_stats()
