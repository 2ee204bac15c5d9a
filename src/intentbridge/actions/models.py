"""Remote action request/result models."""

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class ActionRequest(BaseModel):
    """One remote procedure call: method, parameters, and caller context."""

    method: str = Field(min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)
    context: dict[str, Any] = Field(default_factory=dict)


class ActionResult(BaseModel):
    """Normalized outcome of a remote action.

    `data` is only set on success and `error` only on failure.
    """

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> "ActionResult":
        if self.success and self.error is not None:
            raise ValueError("a successful result cannot carry an error")
        if not self.success and self.data is not None:
            raise ValueError("a failed result cannot carry data")
        return self

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)

    def to_payload(self) -> dict[str, Any]:
        """Wire shape: only the fields that apply to this outcome."""
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}
