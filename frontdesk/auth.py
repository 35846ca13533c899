import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import HTTPException, Request
from jose import JWTError, jwt

from .config import CLERK_ISSUER, CLERK_JWKS_URL, CLERK_SECRET_KEY, CLERK_SESSION_COOKIE
from .identity import get_identity_client

logger = logging.getLogger(__name__)

# Cache for Clerk's JWKS
_cached_jwks = None


@dataclass
class RequestContext:
    """Caller identity resolved once per request by the auth middleware"""

    user_id: Optional[str] = None
    org_id: Optional[str] = None
    org_role: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


async def get_clerk_jwks(force_refresh: bool = False) -> Optional[dict]:
    """Fetch the instance JWKS used to sign session tokens"""
    global _cached_jwks
    if _cached_jwks and not force_refresh:
        return _cached_jwks

    headers = {"Authorization": f"Bearer {CLERK_SECRET_KEY}"} if CLERK_SECRET_KEY else {}
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(CLERK_JWKS_URL, headers=headers)
        if response.status_code == 200:
            _cached_jwks = response.json()
            logger.info(f"✅ Fetched {len(_cached_jwks.get('keys', []))} Clerk signing keys")
            return _cached_jwks
        logger.error(f"❌ Failed to fetch Clerk JWKS: HTTP {response.status_code}")
    except Exception as e:
        logger.error(f"❌ Error fetching Clerk JWKS: {str(e)}")
    return None


async def verify_session_token(token: str) -> dict:
    """Verify a Clerk session JWT (RS256) and return its claims"""
    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        raise HTTPException(status_code=401, detail="Invalid token format") from e

    kid = header.get("kid")
    if header.get("alg") != "RS256" or not kid:
        raise HTTPException(status_code=401, detail="Invalid token header")

    jwks = await get_clerk_jwks()
    key = _find_key(jwks, kid)
    if key is None:
        logger.warning(f"⚠️ Key ID {kid} not found in JWKS, refreshing")
        key = _find_key(await get_clerk_jwks(force_refresh=True), kid)
        if key is None:
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=["RS256"],
            issuer=CLERK_ISSUER,
            options={"verify_aud": False, "verify_iss": bool(CLERK_ISSUER)},
        )
    except JWTError as e:
        logger.info(f"ℹ️ Session token rejected: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired session") from e

    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token claims")
    return claims


def _find_key(jwks: Optional[dict], kid: str) -> Optional[dict]:
    if not jwks:
        return None
    return next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)


def extract_session_token(request: Request) -> Optional[str]:
    """Session token from the Authorization header, else the session cookie"""
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return request.cookies.get(CLERK_SESSION_COOKIE)


def context_from_claims(claims: dict) -> RequestContext:
    # Session token v2 nests the active organization under "o"
    org = claims.get("o") or {}
    return RequestContext(
        user_id=claims.get("sub"),
        org_id=claims.get("org_id") or org.get("id"),
        org_role=claims.get("org_role") or (f"org:{org['rol']}" if org.get("rol") else None),
    )


async def resolve_request_context(request: Request) -> RequestContext:
    """
    Resolve the caller once per request.
    A signed-in user with no active organization but exactly one membership
    gets that organization selected automatically.
    """
    token = extract_session_token(request)
    if not token:
        return RequestContext()

    try:
        claims = await verify_session_token(token)
    except HTTPException as e:
        logger.debug(f"Session not accepted for {request.url.path}: {e.detail}")
        return RequestContext()

    context = context_from_claims(claims)
    if context.org_id:
        return context

    try:
        memberships = await get_identity_client().get_user_memberships(context.user_id)
        if len(memberships) == 1:
            membership = memberships[0]
            context.org_id = membership.get("organization", {}).get("id")
            context.org_role = membership.get("role")
            logger.info(f"🔄 Auto-selected organization {context.org_id} for user {context.user_id}")
    except Exception as e:
        logger.warning(f"⚠️ Could not auto-select organization for {context.user_id}: {e}")

    return context


def get_request_context(request: Request) -> RequestContext:
    """FastAPI dependency: context stored by the auth middleware"""
    context = getattr(request.state, "context", None)
    return context if context is not None else RequestContext()


def require_user(request: Request) -> RequestContext:
    """FastAPI dependency for REST routes that need a signed-in caller"""
    context = get_request_context(request)
    if not context.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return context
