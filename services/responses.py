"""Success envelope shared by every JSON route: ``{success, data?, message?, timestamp}``."""

from typing import Any, Dict, Optional

from services.errors import utc_timestamp


def success(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    body["timestamp"] = utc_timestamp()
    return body
