from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =========================
# SQL
# =========================
class SqlRequest(BaseModel):
    query: str = Field(min_length=1)


class SqlQueryResponse(BaseModel):
    message: str
    data: List[Dict[str, Any]]


class SqlExecuteResponse(SqlQueryResponse):
    result: str = "Query executed successfully"


class ErrorResponse(BaseModel):
    error: str


# =========================
# Policy checks
# =========================
class PolicyCheckResult(BaseModel):
    name: str
    statement: str
    expected_allowed: bool
    # None when the setup statement failed and the probe itself never ran
    allowed: Optional[bool]
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def inconclusive(self) -> bool:
        return self.allowed is None

    @property
    def passed(self) -> bool:
        return not self.inconclusive and self.allowed == self.expected_allowed
