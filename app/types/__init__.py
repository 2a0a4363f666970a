from .requests import (
    CreateAccountData,
    CreateAccountRequest,
    InternalPublicKey,
    RegistrationSignature,
    ProofPoints,
    RegisterData,
    RegisterRequest,
)
from .responses import TxAttributes, TxResource, TxResponse, Problem, ProblemResponse

__all__ = [
    "CreateAccountData",
    "CreateAccountRequest",
    "InternalPublicKey",
    "RegistrationSignature",
    "ProofPoints",
    "RegisterData",
    "RegisterRequest",
    "TxAttributes",
    "TxResource",
    "TxResponse",
    "Problem",
    "ProblemResponse",
]
