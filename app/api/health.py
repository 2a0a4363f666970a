from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..core.execution import RelayerError
from .deps import RelayerDeps, get_relayer_deps

router = APIRouter()


@router.get("/healthz")
async def health_check(deps: RelayerDeps = Depends(get_relayer_deps)) -> Dict[str, Any]:
    """Health check endpoint that verifies the execution layer is reachable"""

    rpc_status: Dict[str, Any] = {"status": "healthy"}
    try:
        remote_chain_id = await deps.client.chain_id()
        rpc_status["chain_id"] = remote_chain_id
        if remote_chain_id != deps.account.chain_id:
            rpc_status["status"] = "mismatch"
    except RelayerError as exc:
        rpc_status = {"status": "unavailable", "error": exc.category.value}

    state = deps.sequencer.snapshot()

    return {
        "status": "healthy" if rpc_status["status"] == "healthy" else "degraded",
        "rpc": rpc_status,
        "account": {
            "address": deps.account.address,
            "chain_id": deps.account.chain_id,
        },
        "nonce": {
            "next": state.next_nonce,
            "last_synced": state.last_synced_nonce,
            "committed": state.committed,
            "resyncs": state.resyncs,
            "busy": deps.sequencer.locked,
        },
        "registration_enabled": deps.registration is not None,
    }
