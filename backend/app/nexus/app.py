"""FastAPI application."""

import argparse
from typing import Dict, List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nexus.configs import get_settings
from nexus.controllers.chat_controllers import chat_router
from nexus.logger_config import get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Build the API with the chat routes and the configured CORS origins."""
    settings = get_settings()

    logger.info("Starting FastAPI application...")
    app = FastAPI(
        title="Nexus Hub API",
        root_path=settings.ROOT_PATH_BACKEND,
        description="Multimodal chat hub routing messages to specialized Gemini agents.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(chat_router)

    @app.get("/", response_description="Api healthcheck")
    async def index() -> Dict[str, str]:
        """Define a route for handling HTTP GET requests to the root URL ("/")."""
        return {"status": "ok"}

    return app


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--docker", action="store_true", help="Running with docker")
    parser.add_argument("--host", default="127.0.0.1", help="Application host.")
    parser.add_argument("--port", default="8000", help="Application port.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development purposes.",
    )
    args = parser.parse_args(argv)
    if not args.docker:
        from dotenv import load_dotenv

        load_dotenv(".env")

    import uvicorn

    uvicorn.run(
        "nexus.app:create_app",
        factory=True,
        host=args.host,
        port=int(args.port),
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
