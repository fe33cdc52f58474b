# app/services/qr_decoder.py
"""
Decodes the content of a scanned student QR code into a search term.

Accepted shapes (first one that yields a term wins):
  1. Plain JSON:            {"matricula": "202161606", "action": "entry"}
  2. Base64 of that JSON:   eyJtYXRyaWN1bGEiOi...
  3. AES-GCM encrypted:     base64([12-byte IV][ciphertext + 16-byte tag]),
                            key = SHA-256(QR_SECRET). Only tried when a secret is set.

Never raises. Anything that cannot be decoded returns None and the caller
searches for the raw scanned text instead.
"""

import base64
import binascii
import hashlib
import re
from dataclasses import dataclass
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.utils.json_parser import safe_parse_json
from app.utils.logger import get_logger

logger = get_logger(__name__)

SEARCH_FIELDS = ("matricula", "studentId", "plate")   # priority order
ACTIONS = ("entry", "exit")
IV_LENGTH = 12
TAG_LENGTH = 16

_BASE64_SHAPE = re.compile(r"^[A-Za-z0-9+/]+=*$")


@dataclass(frozen=True)
class QrPayload:
    search_term: str
    action: Optional[str] = None    # entry | exit


def is_base64_like(raw: str) -> bool:
    trimmed = raw.strip()
    return bool(_BASE64_SHAPE.match(trimmed)) and len(trimmed) % 4 != 1


def _b64decode(raw: str) -> Optional[bytes]:
    """Lenient about missing padding, strict about the alphabet."""
    trimmed = re.sub(r"\s", "", raw)
    if not trimmed:
        return None
    unpadded = trimmed.rstrip("=")
    try:
        return base64.b64decode(unpadded + "=" * (-len(unpadded) % 4), validate=True)
    except (binascii.Error, ValueError):
        return None


def extract_payload(data) -> Optional[QrPayload]:
    """Pick the search term and optional action out of a decoded JSON object."""
    if not isinstance(data, dict):
        return None

    search_term = None
    for field_name in SEARCH_FIELDS:
        value = data.get(field_name)
        if isinstance(value, str) and value.strip():
            search_term = value.strip()
            break
    if search_term is None:
        return None

    action = data.get("action")
    return QrPayload(search_term=search_term, action=action if action in ACTIONS else None)


def _payload_from_bytes(raw: bytes) -> Optional[QrPayload]:
    return extract_payload(safe_parse_json(raw))


def decrypt_payload(raw: str, secret: str) -> Optional[bytes]:
    """AES-GCM decrypt a base64 [IV][ciphertext+tag] blob. Returns None on any failure."""
    blob = _b64decode(raw)
    if blob is None or len(blob) < IV_LENGTH + TAG_LENGTH:
        return None
    key = hashlib.sha256(secret.encode("utf-8")).digest()
    try:
        return AESGCM(key).decrypt(blob[:IV_LENGTH], blob[IV_LENGTH:], None)
    except (InvalidTag, ValueError):
        logger.debug("QR payload failed AES-GCM authentication")
        return None


def decode_qr_payload(raw: Optional[str], secret: Optional[str] = None) -> Optional[QrPayload]:
    """Turn scanned QR text into a QrPayload, or None if it carries no structured payload."""
    if not raw or not isinstance(raw, str) or not raw.strip():
        return None

    payload = _payload_from_bytes(raw.strip().encode("utf-8"))
    if payload:
        return payload

    if not is_base64_like(raw):
        return None

    decoded = _b64decode(raw)
    if decoded is not None:
        payload = _payload_from_bytes(decoded)
        if payload:
            return payload

    if not secret:
        return None

    plaintext = decrypt_payload(raw, secret)
    if plaintext is None:
        return None
    return _payload_from_bytes(plaintext)
