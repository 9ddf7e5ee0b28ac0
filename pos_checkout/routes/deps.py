"""Shared route dependencies"""

from fastapi import Request
from fastapi.responses import JSONResponse

from ..services.commands import CommandResult
from ..services.session import PosSession


def get_session(request: Request) -> PosSession:
    """The register session created at application startup"""
    return request.app.state.session


def respond(result: CommandResult) -> JSONResponse:
    return JSONResponse(
        status_code=result.status_code,
        content=result.model_dump(mode="json"),
    )
