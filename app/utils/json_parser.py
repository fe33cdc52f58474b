# app/utils/json_parser.py
"""
Helpers for parsing untrusted JSON (scanned QR payloads).
"""

import json
from typing import Optional, Any


def safe_parse_json(raw_body: bytes) -> Optional[Any]:
    """Parse JSON bytes safely. Returns None on error."""
    try:
        return json.loads(raw_body.decode("utf-8", errors="replace"))
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        return None
