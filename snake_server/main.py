# snake_server/main.py
"""FastAPI application wiring the game service to HTTP and WebSocket."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from snake_server.api.routes import GameAPI
from snake_server.config.settings import HOST, LOG_LEVEL, PORT
from snake_server.services.game_service import GameService
from snake_server.services.websocket_service import WebSocketService
from snake_server.utils.logger import configure_logging


def create_app(game_service: Optional[GameService] = None) -> FastAPI:
    """Build the app around a game service, creating a default one if needed."""
    game_service = game_service or GameService()
    websocket_service = WebSocketService(game_service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        websocket_service.start_background_tasks()
        yield
        await websocket_service.stop_background_tasks()

    app = FastAPI(title="snake-server", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(GameAPI(game_service).router)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await websocket_service.handle_connection(websocket)

    app.state.game_service = game_service
    app.state.websocket_service = websocket_service
    return app


app = create_app()


def run():
    import uvicorn

    configure_logging(LOG_LEVEL)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
