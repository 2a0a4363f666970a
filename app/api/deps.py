"""
Request-scoped dependencies for the relay endpoints.

Everything a handler needs is carried by one explicit ``RelayerDeps``
value, built once at startup and handed to handlers through FastAPI's
dependency injection.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import Request

from ..config import Settings
from ..core.execution import (
    AccountSequencer,
    ConfigurationError,
    ControlledAccount,
    EthRpcClient,
    ExecutionClient,
    SubmissionPipeline,
)
from ..core.registration import RegistrationContract


@dataclass(frozen=True)
class RelayerDeps:
    pipeline: SubmissionPipeline
    client: ExecutionClient
    registration: Optional[RegistrationContract] = None
    relayer_target_address: Optional[str] = None
    submission_timeout_seconds: float = 60.0

    @property
    def account(self) -> ControlledAccount:
        return self.pipeline.account

    @property
    def sequencer(self) -> AccountSequencer:
        return self.pipeline.sequencer


def get_relayer_deps(request: Request) -> RelayerDeps:
    deps = getattr(request.app.state, "relayer", None)
    if deps is None:
        raise RuntimeError("Relayer dependencies are not initialized")
    return deps


async def build_relayer_deps(settings: Settings) -> Tuple[RelayerDeps, EthRpcClient]:
    """
    Wire the relay from settings.

    Returns the dependencies and the RPC client, which the caller closes on
    shutdown. The nonce is primed from the execution layer here.
    """
    if not settings.has_rpc_url:
        raise ConfigurationError("rpc_url is not configured")
    if not settings.has_private_key:
        raise ConfigurationError("private_key is not configured")

    client = EthRpcClient(settings.rpc_url, timeout=settings.rpc_timeout_seconds)
    try:
        chain_id = settings.chain_id or await client.chain_id()
        try:
            account = ControlledAccount.from_private_key(
                settings.private_key.get_secret_value(), chain_id=chain_id
            )
        except Exception as e:
            raise ConfigurationError(f"private_key is invalid: {e}") from e

        sequencer = AccountSequencer(account, block_tag=settings.nonce_block_tag)
        async with sequencer.exclusive():
            await sequencer.resynchronize(client)
    except BaseException:
        await client.close()
        raise

    pipeline = SubmissionPipeline(
        client,
        sequencer,
        gas_multiplier=settings.gas_multiplier,
        nonce_error_codes=settings.nonce_error_codes,
    )
    registration = (
        RegistrationContract(settings.registration_address)
        if settings.registration_address
        else None
    )
    deps = RelayerDeps(
        pipeline=pipeline,
        client=client,
        registration=registration,
        relayer_target_address=settings.relayer_target_address,
        submission_timeout_seconds=settings.submission_timeout_seconds,
    )
    return deps, client
