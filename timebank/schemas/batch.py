from pydantic import BaseModel
from typing import Optional

from timebank.services.ledger.types import BatchResult


class BatchRequest(BaseModel):
    ids: list[int]
    reasons: list[str] = []
    note: Optional[str] = None


class BatchResultResponse(BaseModel):
    succeeded: int
    failed: int
    total: int
    errors: dict[int, str] = {}

    @classmethod
    def from_result(cls, result: BatchResult) -> "BatchResultResponse":
        return cls(succeeded=result.succeeded, failed=result.failed, total=result.total, errors=result.errors)
