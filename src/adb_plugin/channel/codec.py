"""Method call and result types plus their JSON envelope encoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, TypeAlias

RequestId: TypeAlias = int | str | None


class ChannelError(Exception):
    """Error raised for malformed envelopes or failing handlers."""

    def __init__(self, message: str, code: str = "channel_error", details: Any = None) -> None:
        self.message = message
        self.code = code
        self.details = details
        super().__init__(f"[{code}] {message}")


@dataclass(frozen=True, slots=True)
class MethodCall:
    """A named request dispatched to a channel handler."""

    method: str
    arguments: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MethodCall:
        method = data.get("method")
        if not isinstance(method, str):
            raise ChannelError("Missing method", "invalid_envelope")
        return cls(method=method, arguments=data.get("args"))

    def to_dict(self, request_id: RequestId = None) -> dict[str, Any]:
        envelope: dict[str, Any] = {"method": self.method}
        if self.arguments is not None:
            envelope["args"] = self.arguments
        if request_id is not None:
            envelope["id"] = request_id
        return envelope


@dataclass(frozen=True, slots=True)
class Success:
    """A handled call and its value."""

    result: Any


@dataclass(frozen=True, slots=True)
class Failure:
    """A call the host could not complete."""

    code: str
    message: str
    details: Any = None


class _NotImplementedType:
    """Marker for "no handler for this method". Not an error."""

    _instance: _NotImplementedType | None = None

    def __new__(cls) -> _NotImplementedType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_IMPLEMENTED"

    def __bool__(self) -> bool:
        return False


NOT_IMPLEMENTED: Final = _NotImplementedType()

Result: TypeAlias = Success | Failure | _NotImplementedType


def is_not_implemented(result: object) -> bool:
    return result is NOT_IMPLEMENTED


def encode_response(result: Result, request_id: RequestId = None) -> dict[str, Any]:
    """Convert a result into its response envelope."""
    if isinstance(result, Success):
        return {"id": request_id, "result": result.result}
    if isinstance(result, Failure):
        error: dict[str, Any] = {"code": result.code, "message": result.message}
        if result.details is not None:
            error["details"] = result.details
        return {"id": request_id, "error": error}
    return {"id": request_id, "notImplemented": True}


def decode_response(data: dict[str, Any]) -> Result:
    """Inverse of encode_response."""
    if data.get("notImplemented") is True:
        return NOT_IMPLEMENTED
    if "error" in data:
        err = data["error"]
        if not isinstance(err, dict):
            raise ChannelError("Malformed error object", "invalid_envelope")
        return Failure(
            code=str(err.get("code", "channel_error")),
            message=str(err.get("message", "Unknown error")),
            details=err.get("details"),
        )
    if "result" in data:
        return Success(data["result"])
    raise ChannelError("Response has no result, error or notImplemented", "invalid_envelope")
