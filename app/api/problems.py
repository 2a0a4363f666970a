"""
JSON:API problem documents for relay errors.

Client errors carry a detail; internal errors never do, their cause is
only logged.
"""

from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..types.responses import Problem, ProblemResponse

logger = structlog.stdlib.get_logger("problems")


def _render(status_code: int, problems: List[Problem]) -> JSONResponse:
    body = ProblemResponse(errors=problems).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def bad_request(detail: str, meta: Optional[Dict[str, Any]] = None) -> JSONResponse:
    return _render(400, [Problem(title="Bad Request", status="400", detail=detail, meta=meta)])


def internal_error() -> JSONResponse:
    return _render(500, [Problem(title="Internal Server Error", status="500")])


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        pointer = "/" + "/".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(
            Problem(
                title="Bad Request",
                status="400",
                detail=error.get("msg", "invalid value"),
                meta={"pointer": pointer},
            )
        )
    logger.warning("request_rejected", path=request.url.path, errors=len(problems))
    return _render(400, problems or [Problem(title="Bad Request", status="400")])


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_error", path=request.url.path, exc_info=exc)
    return internal_error()


def register_problem_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
