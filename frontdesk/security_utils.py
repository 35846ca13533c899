"""
Security utilities
Signed action tokens, temporary passwords and token encryption at rest
"""

import base64
import hashlib
import logging
import secrets
import string
from typing import Any, Optional

from cryptography.fernet import Fernet, InvalidToken
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from .config import SECRET_KEY

logger = logging.getLogger(__name__)

VISITOR_RESPONSE_SALT = "visitor-response"
VISITOR_RESPONSE_MAX_AGE = 24 * 60 * 60  # 24 hours
VISITOR_RESPONSE_ACTIONS = ("accept", "decline")

PASSWORD_SYMBOLS = "!@#$%^&*"


# ============================================================================
# TOKEN GENERATION & VALIDATION
# ============================================================================


def generate_timed_token(data: dict[str, Any], salt: str) -> str:
    """Sign `data` with the app secret; the timestamp is embedded by itsdangerous"""
    serializer = URLSafeTimedSerializer(SECRET_KEY)
    return serializer.dumps(data, salt=salt)


def verify_timed_token(token: str, salt: str, max_age: int) -> Optional[dict[str, Any]]:
    """
    Verify and decode a timed token

    Returns:
        Decoded data if valid, None if invalid or expired
    """
    serializer = URLSafeTimedSerializer(SECRET_KEY)
    try:
        return serializer.loads(token, salt=salt, max_age=max_age)
    except SignatureExpired:
        logger.warning("Token expired")
        return None
    except BadSignature:
        logger.warning("Invalid token signature")
        return None


def generate_action_token(visitor_id: int, staff_id: int, action: str) -> str:
    """Token for a single accept/decline link in the visitor arrival email"""
    if action not in VISITOR_RESPONSE_ACTIONS:
        raise ValueError(f"Unknown visitor response action: {action}")
    return generate_timed_token(
        {"visitorId": visitor_id, "staffId": staff_id, "action": action},
        salt=VISITOR_RESPONSE_SALT,
    )


def verify_action_token(
    token: str, action: str, max_age: int = VISITOR_RESPONSE_MAX_AGE
) -> Optional[dict[str, int]]:
    """
    Verify a visitor response token for the requested action.

    Returns {"visitorId", "staffId"} or None when the token is expired,
    forged, malformed or was minted for the other action.
    """
    data = verify_timed_token(token, salt=VISITOR_RESPONSE_SALT, max_age=max_age)
    if not isinstance(data, dict):
        return None

    visitor_id = data.get("visitorId")
    staff_id = data.get("staffId")
    if not isinstance(visitor_id, int) or not isinstance(staff_id, int):
        logger.warning("Visitor response token has a malformed payload")
        return None
    if data.get("action") != action:
        logger.warning(f"Visitor response token minted for {data.get('action')!r}, used for {action!r}")
        return None

    return {"visitorId": visitor_id, "staffId": staff_id}


# ============================================================================
# PASSWORDS
# ============================================================================


def generate_temporary_password(length: int = 12) -> str:
    """Random password with at least one upper, lower, digit and symbol"""
    required = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
        secrets.choice(PASSWORD_SYMBOLS),
    ]
    alphabet = string.ascii_letters + string.digits + PASSWORD_SYMBOLS
    rest = [secrets.choice(alphabet) for _ in range(max(length, len(required)) - len(required))]
    chars = required + rest
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


# ============================================================================
# ENCRYPTION AT REST
# ============================================================================


def _cipher_suite() -> Fernet:
    # Fernet needs 32 url-safe base64 bytes; derive them from the app secret
    return Fernet(base64.urlsafe_b64encode(hashlib.sha256(SECRET_KEY.encode()).digest()))


def encrypt_secret(value: str) -> str:
    return _cipher_suite().encrypt(value.encode()).decode()


def decrypt_secret(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return _cipher_suite().decrypt(value.encode()).decode()
    except InvalidToken:
        logger.error("❌ Failed to decrypt stored secret")
        return None
