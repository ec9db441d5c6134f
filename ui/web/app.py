"""
FastAPI Application - Main web application setup
===============================================

This module creates and configures the FastAPI application
with the chat routes, templates and shared services.
"""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from core.config import Config, load_config
from core.exceptions import AssistantError
from core.logging import setup_logging, get_logger
from assistant.engine import IntentMatcher
from assistant.faq import rule_table_from_config
from assistant.session import SessionStore
from services.interview_prep import InterviewPrepService
from llm.factory import create_llm_provider

logger = get_logger("web.app")


def build_interview_service(config: Config) -> Optional[InterviewPrepService]:
    """Create the interview prep service, or None without an API key."""
    if not config.llm.enabled:
        logger.info("No LLM API key configured, interview prep disabled")
        return None

    try:
        return InterviewPrepService(create_llm_provider(config=config))
    except AssistantError as e:
        logger.warning(f"Failed to initialize LLM: {e}")
        return None


def create_app(
    config: Optional[Config] = None,
    matcher: Optional[IntentMatcher] = None,
    interview_service: Optional[InterviewPrepService] = None,
    debug: bool = False
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration
        matcher: Intent matcher (built from config if omitted)
        interview_service: Interview prep service (built from config if omitted)
        debug: Enable debug mode

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = load_config()

    debug = debug or config.debug or config.ui.web_debug

    setup_logging(
        log_dir=config.log_dir or None,
        log_level="DEBUG" if debug else "INFO",
        console_output=True
    )

    if matcher is None:
        matcher = IntentMatcher(
            table=rule_table_from_config(config),
            max_input_length=config.assistant.max_input_length,
        )

    if interview_service is None:
        interview_service = build_interview_service(config)

    app = FastAPI(
        title=config.app_name,
        description="FAQ chat assistant and interview prep for the student job board",
        version=config.version,
        debug=debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    templates_dir = Path(__file__).parent / "templates"

    app.state.config = config
    app.state.matcher = matcher
    app.state.sessions = SessionStore(
        matcher,
        typing_delay=(config.assistant.typing_delay_min, config.assistant.typing_delay_max),
        greeting=config.assistant.greeting or None,
        max_sessions=config.assistant.max_sessions,
        session_ttl=config.assistant.session_ttl,
    )
    app.state.interview_service = interview_service
    app.state.templates = Jinja2Templates(directory=str(templates_dir))

    from .routes import router as main_router
    app.include_router(main_router, prefix="")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc) if debug else "An error occurred"}
        )

    logger.info("Web application created")

    return app


def run_app(
    host: str = "127.0.0.1",
    port: int = 8080,
    debug: bool = False,
    config: Optional[Config] = None
) -> None:
    """
    Run the web application server.

    Args:
        host: Host address to bind
        port: Port to listen on
        debug: Enable debug mode
        config: Application configuration
    """
    if config is None:
        config = load_config()

    app = create_app(config=config, debug=debug)

    logger.info(f"Starting web server on {host}:{port}")

    import uvicorn
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="debug" if debug else "info"
    )
