"""FastAPI app: authenticated GET /<url> returning the current port snapshot."""

import logging
import time
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request

from portwatch.config.settings import ServerConfig
from portwatch.engine.store import StatusStore
from portwatch.status_server.auth import SecretHeaderGuard, Unauthorized, unauthorized_handler

logger = logging.getLogger(__name__)


def create_app(store: StatusStore, server_config: ServerConfig) -> FastAPI:
    """Build FastAPI app with one guarded route; the store is only ever read here."""
    app = FastAPI(title="portwatch", description="Local TCP port status")
    guard = SecretHeaderGuard(server_config.header_name, server_config.secret)
    app.add_exception_handler(Unauthorized, unauthorized_handler)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000.0,
        )
        return response

    # Sync handler: runs in the threadpool, so blocking on the read lock never stalls the event loop
    @app.get(server_config.route_path, dependencies=[Depends(guard)])
    def get_status() -> Dict[str, Any]:
        """Return {"status": "running", "ports": {name: "Open"|"Closed"}}."""
        return {"status": "running", "ports": store.read_all()}

    return app


def run_server(app: FastAPI, server_config: ServerConfig) -> None:
    """Serve app with uvicorn on server_config.host:port. Blocks until shutdown."""
    import uvicorn

    logger.info(
        "Status server on %s:%s (GET %s, header %s)",
        server_config.host,
        server_config.port,
        server_config.route_path,
        server_config.header_name,
    )
    uvicorn.run(
        app,
        host=server_config.host,
        port=server_config.port,
        log_level="info",
        access_log=False,
        log_config=None,
    )
