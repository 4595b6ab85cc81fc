import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def envelope(
    command: str,
    *,
    status: str = "OK",
    message: str = "",
    payload: Optional[Dict[str, Any]] = None,
    summary: Optional[str] = None,
) -> Dict[str, Any]:
    """Body every routine command prints: command, status, message, timestamp, payload."""
    body: Dict[str, Any] = {
        "command": command,
        "status": status,
        "message": message,
        "timestamp": iso_timestamp(),
        "payload": payload or {},
    }
    if summary:
        body["summary"] = summary
    return body


def emit(body: Dict[str, Any], exit_code: int = 0) -> int:
    print(json.dumps(body, ensure_ascii=False, indent=2))
    return exit_code


def structured_response(
    command: str,
    *,
    status: str = "OK",
    message: str = "",
    payload: Optional[Dict[str, Any]] = None,
    summary: Optional[str] = None,
    exit_code: int = 0,
) -> int:
    return emit(envelope(command, status=status, message=message, payload=payload, summary=summary), exit_code)


def structured_error(
    command: str,
    message: str,
    *,
    code: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> int:
    """Error envelope with exit code 1; ``code`` leads the payload when given."""
    body: Dict[str, Any] = {"code": code} if code else {}
    body.update(payload or {})
    return structured_response(command, status="ERROR", message=message, payload=body, exit_code=1)


__all__ = ["emit", "envelope", "iso_timestamp", "structured_response", "structured_error"]
