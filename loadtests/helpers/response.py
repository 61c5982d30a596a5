"""Response error extraction for load test observability.

Handles the two error shapes the storefront API returns:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Storefront rejections: {"reason": "...", "message": "...", "errors": {...}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact, human-readable message from an API error response."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "reason" in body:
        detail = f"{body['reason']}: {body.get('message', '')}"
        errors = body.get("errors") or {}
        if errors:
            detail += " | " + " | ".join(f"{field}: {', '.join(map(str, msgs))}" for field, msgs in errors.items())
        return detail

    return str(body)[:300]
