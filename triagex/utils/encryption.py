import base64
import hashlib
import json
import logging
import os
from typing import Any

from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy.types import TypeDecorator, Text

logger = logging.getLogger("triagex")


def _build_cipher() -> Fernet:
    """Derive a stable Fernet key from ENCRYPTION_SECRET (or fallback dev secret)."""
    secret = os.getenv("ENCRYPTION_SECRET", "dev-secret-key-change-me").encode("utf-8")
    # Fernet wants 32 urlsafe-base64 encoded bytes
    key = base64.urlsafe_b64encode(hashlib.sha256(secret).digest())
    return Fernet(key)


_CIPHER = _build_cipher()


class EncryptedJSON(TypeDecorator):
    """Stores JSON-serializable values as a Fernet token.

    Values that cannot be decrypted (e.g. after a secret rotation) load as None.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Any:  # type: ignore[override]
        if value is None:
            return None
        payload = json.dumps(value, ensure_ascii=False)
        return _CIPHER.encrypt(payload.encode("utf-8")).decode("utf-8")

    def process_result_value(self, value: Any, dialect) -> Any:  # type: ignore[override]
        if value is None:
            return None
        try:
            raw = _CIPHER.decrypt(value.encode("utf-8")).decode("utf-8")
        except InvalidToken:
            logger.warning({"function": "EncryptedJSON.process_result_value", "status": "undecryptable"})
            return None
        return json.loads(raw)
