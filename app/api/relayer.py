import asyncio

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.execution import InputError, OperationRequest, RelayerError, SubmissionTimeoutError
from ..core.registration import build_raw_request
from ..types.requests import CreateAccountRequest
from ..types.responses import TxResponse
from .deps import RelayerDeps, get_relayer_deps
from .problems import bad_request, internal_error

router = APIRouter(prefix="/integrations/relayer/v1")

logger = structlog.stdlib.get_logger("relayer")


async def submit_and_render(deps: RelayerDeps, operation: OperationRequest) -> JSONResponse:
    """Run an operation through the pipeline and render the JSON:API response."""
    log = logger.bind(kind=operation.kind.value)
    try:
        try:
            result = await asyncio.wait_for(
                deps.pipeline.submit(operation),
                timeout=deps.submission_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise SubmissionTimeoutError(
                f"submission exceeded {deps.submission_timeout_seconds}s"
            ) from e
    except RelayerError as exc:
        log.error(
            "submission_failed",
            category=exc.category.value,
            error=exc.message,
            details=exc.details,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
        return internal_error()

    return JSONResponse(content=TxResponse.from_hash(result.tx_hash).model_dump())


@router.post("/create-account")
async def create_account(
    request: CreateAccountRequest,
    deps: RelayerDeps = Depends(get_relayer_deps),
) -> JSONResponse:
    """Relay a pre-built account creation payload."""
    try:
        operation = build_raw_request(request.data.tx_data, deps.relayer_target_address)
    except InputError as exc:
        logger.warning("invalid_tx_data", error=exc.message)
        return bad_request(exc.message)

    return await submit_and_render(deps, operation)
