from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .aggregator import build_report
from .config import Settings, configure_logging, get_settings
from .github import GitHubFetchError, bearer_token, fetch_user_data
from .schemas import ErrorOut, WrappedReport

log = logging.getLogger(__name__)


def app_settings(request: Request) -> Settings:
    return request.app.state.settings


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="GitHub Wrapped")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GitHubFetchError)
    async def _fetch_failed(request: Request, exc: GitHubFetchError) -> JSONResponse:
        log.error("Upstream failure on %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=ErrorOut(error="GitHub fetch failed").model_dump())

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get(
        "/api/github/{username}",
        response_model=WrappedReport,
        responses={500: {"model": ErrorOut}},
    )
    async def github_wrapped(
        username: str,
        authorization: Optional[str] = Header(default=None),
        settings: Settings = Depends(app_settings),
    ):
        profile, repos, events = await fetch_user_data(username, bearer_token(authorization), settings)
        report = build_report(profile, repos, events, year=settings.report_year, tz=settings.tzinfo)
        log.info("Built report for %s: %d repos, %d events", username, len(repos), len(events))
        return report

    return app


app = create_app()
