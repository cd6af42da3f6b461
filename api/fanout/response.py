"""Response envelopes for the management API."""

from typing import Any, Optional, Sequence


def paginated_response(
    items: Sequence[Any],
    total: int,
    limit: int,
    offset: int,
) -> dict:
    return {
        "data": items,
        "meta": {
            "total": total,
            "limit": limit,
            "offset": offset,
        },
    }


def single_response(item: Any) -> dict:
    return {"data": item}


def error_response(code: int, message: str, details: Optional[list] = None) -> dict:
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}
