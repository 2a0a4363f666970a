from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TxAttributes(BaseModel):
    tx_hash: str = Field(description="Hash of the submitted transaction")


class TxResource(BaseModel):
    id: str = Field(description="Transaction hash")
    type: str = Field(default="txs", description="Resource type")
    attributes: TxAttributes


class TxResponse(BaseModel):
    data: TxResource

    @classmethod
    def from_hash(cls, tx_hash: str) -> "TxResponse":
        return cls(data=TxResource(id=tx_hash, attributes=TxAttributes(tx_hash=tx_hash)))


class Problem(BaseModel):
    title: str
    status: str
    detail: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None


class ProblemResponse(BaseModel):
    errors: List[Problem]
