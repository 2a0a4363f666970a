import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.execution import InputError
from ..core.registration import materialize_registration
from ..types.requests import RegisterRequest
from .deps import RelayerDeps, get_relayer_deps
from .problems import bad_request, internal_error
from .relayer import submit_and_render

router = APIRouter(prefix="/integrations/registration-relayer/v1")

logger = structlog.stdlib.get_logger("registration")


@router.post("/register")
async def register(
    request: RegisterRequest,
    deps: RelayerDeps = Depends(get_relayer_deps),
) -> JSONResponse:
    """Submit a registration proof to the registration contract."""
    if deps.registration is None:
        logger.error("registration_contract_not_configured")
        return internal_error()

    data = request.data
    try:
        submission = materialize_registration(
            x=data.internal_public_key.x,
            y=data.internal_public_key.y,
            s=data.signature.s,
            n=data.signature.n,
            a=data.proof.a,
            b=data.proof.b,
            c=data.proof.c,
            timestamp=data.timestamp,
        )
        operation = deps.registration.build_register_request(submission)
    except InputError as exc:
        logger.warning("invalid_registration", category=exc.category.value, error=exc.message)
        return bad_request(exc.message)

    return await submit_and_render(deps, operation)
