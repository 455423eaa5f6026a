from fastapi import FastAPI, WebSocket, WebSocketDisconnect, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
import argparse
import logging
from typing import Optional
from .remote_tree import RemoteTree
from .config import load_settings
from .error_handling import (
    setup_logging,
    handle_error,
    log_operation,
    UsageError,
    NodeNotFoundError,
    UnknownRouteError
)

logger = logging.getLogger(__name__)

def _status_for(error: Exception) -> int:
    if isinstance(error, (NodeNotFoundError, UnknownRouteError)):
        return 404
    if isinstance(error, (UsageError, KeyError, TypeError, ValueError)):
        return 400
    return 500

def create_app(tree: Optional[RemoteTree] = None) -> FastAPI:
    app = FastAPI()
    app.state.tree = tree or RemoteTree()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Simple health check endpoint"""
        return {"status": "ok", "service": "cloudtree"}

    @app.post("/api/{route}")
    async def command_endpoint(route: str, request: Request):
        try:
            body = await request.json()
            if not isinstance(body, dict):
                raise UsageError("Command body must be a JSON object")
            log_operation(logger, route, **body)
            data = app.state.tree.handle(route, body)
            return {"type": "success", "data": data}
        except Exception as e:
            return JSONResponse(handle_error(logger, e, route), status_code=_status_for(e))

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await websocket.accept()
        logger.debug("WebSocket connection accepted")
        try:
            while True:
                try:
                    data = await websocket.receive_json()
                except ValueError as e:
                    await websocket.send_json(handle_error(logger, e, "websocket_communication"))
                    continue

                if not isinstance(data, dict):
                    await websocket.send_json({
                        "type": "error",
                        "message": "Command must be a JSON object",
                        "details": {}
                    })
                    continue

                command = data.get("command")
                params = data.get("params", {})
                try:
                    log_operation(logger, command, **params)
                    result = app.state.tree.handle(command, params)
                    await websocket.send_json({"type": "success", "data": result})
                except Exception as e:
                    await websocket.send_json(handle_error(logger, e, command))
        except WebSocketDisconnect:
            logger.debug("WebSocket client disconnected")
        finally:
            logger.info("WebSocket connection closed")

    return app

app = create_app()

def main(argv=None):
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Serve an in-memory cloudtree remote")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(argv)

    setup_logging(args.log_level, settings.log_file)
    logger.info("Starting server on http://%s:%d", args.host, args.port)
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        access_log=True
    )

if __name__ == "__main__":
    main()
