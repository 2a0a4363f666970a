from typing import Any, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, conlist, model_validator


class CreateAccountData(BaseModel):
    tx_data: str = Field(description="Hex-encoded, pre-built call data to relay")


class CreateAccountRequest(BaseModel):
    data: CreateAccountData


class InternalPublicKey(BaseModel):
    x: str = Field(description="Hex-encoded X coordinate (32 bytes)")
    y: str = Field(description="Hex-encoded Y coordinate (32 bytes)")


class RegistrationSignature(BaseModel):
    s: str = Field(description="Hex-encoded signature scalar")
    n: str = Field(description="Hex-encoded signature nonce")


class ProofPoints(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    a: List[str] = Field(
        min_length=2,
        max_length=3,
        validation_alias=AliasChoices("a", "pi_a"),
        description="Point A, decimal or 0x-hex strings",
    )
    b: List[conlist(str, min_length=2, max_length=3)] = Field(
        min_length=2,
        max_length=3,
        validation_alias=AliasChoices("b", "pi_b"),
        description="Point B rows, decimal or 0x-hex strings",
    )
    c: List[str] = Field(
        min_length=2,
        max_length=3,
        validation_alias=AliasChoices("c", "pi_c"),
        description="Point C, decimal or 0x-hex strings",
    )

    @model_validator(mode="before")
    @classmethod
    def unwrap_zk_proof(cls, value: Any) -> Any:
        """Accept a snarkjs envelope: {"proof": {...}, "pub_signals": [...]}."""
        if isinstance(value, dict) and isinstance(value.get("proof"), dict):
            return value["proof"]
        return value


class RegisterData(BaseModel):
    internal_public_key: InternalPublicKey
    signature: RegistrationSignature
    proof: ProofPoints
    timestamp: int = Field(description="Unix timestamp in seconds")


class RegisterRequest(BaseModel):
    data: RegisterData
