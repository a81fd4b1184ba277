# icb_backend/app/utils/req_id.py
from __future__ import annotations
import time
from uuid import uuid4

REQUEST_ID_HEADER = "X-Request-ID"

def new_request_id(prefix: str = "icb") -> str:
    return f"{prefix}-{int(time.time()*1000)}-{uuid4().hex[:8]}"

def request_id_from(headers) -> str:
    """Reuse a caller-supplied id when present, else mint one."""
    incoming = (headers.get(REQUEST_ID_HEADER) or "").strip() if headers else ""
    return incoming[:64] or new_request_id()
