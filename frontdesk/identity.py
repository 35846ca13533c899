"""
Clerk Backend API client
Organization, user and membership lookups used for provisioning and staff accounts
"""

import logging
from typing import Any, Optional

import httpx

from .config import CLERK_API_URL, CLERK_SECRET_KEY

logger = logging.getLogger(__name__)

# Membership roles that may bootstrap an Admin staff profile
ADMIN_MEMBERSHIP_ROLES = {"org:admin", "org:creator"}


class IdentityProviderError(Exception):
    """Raised when the identity provider rejects or fails a request"""

    def __init__(self, message: str, status_code: int = 500, errors: Optional[list] = None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def user_message(self) -> str:
        """Join provider error messages into something we can show in the UI"""
        messages = [e.get("long_message") or e.get("message") for e in self.errors if isinstance(e, dict)]
        messages = [m for m in messages if m]
        return ". ".join(messages) if messages else str(self)


class ClerkClient:
    """Thin async wrapper around the Clerk Backend REST API"""

    def __init__(self, secret_key: Optional[str] = CLERK_SECRET_KEY, base_url: str = CLERK_API_URL):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        if not self.secret_key:
            raise IdentityProviderError("CLERK_SECRET_KEY not configured")

        headers = {"Authorization": f"Bearer {self.secret_key}"}
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.request(method, f"{self.base_url}{path}", headers=headers, **kwargs)

        if response.status_code >= 400:
            try:
                errors = response.json().get("errors", [])
            except ValueError:
                errors = []
            logger.error(f"❌ Clerk {method} {path} failed: HTTP {response.status_code}")
            raise IdentityProviderError(
                f"Clerk request failed with HTTP {response.status_code}",
                status_code=response.status_code,
                errors=errors,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get_user(self, user_id: str) -> dict:
        return await self._request("GET", f"/users/{user_id}")

    async def get_organization(self, org_id: str) -> dict:
        return await self._request("GET", f"/organizations/{org_id}")

    async def get_user_memberships(self, user_id: str) -> list[dict]:
        """List a user's organization memberships (each has `role` and `organization`)"""
        payload = await self._request("GET", f"/users/{user_id}/organization_memberships", params={"limit": 100})
        if isinstance(payload, dict):
            return payload.get("data", [])
        return payload or []

    async def create_user(
        self,
        email: str,
        username: str,
        password: str,
        first_name: str,
        last_name: Optional[str] = None,
    ) -> dict:
        body = {
            "email_address": [email],
            "username": username,
            "password": password,
            "first_name": first_name,
            "skip_password_checks": True,
        }
        if last_name:
            body["last_name"] = last_name
        return await self._request("POST", "/users", json=body)

    async def update_user(self, user_id: str, **fields) -> dict:
        return await self._request("PATCH", f"/users/{user_id}", json=fields)

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}")

    async def create_organization_membership(self, org_id: str, user_id: str, role: str) -> dict:
        return await self._request(
            "POST",
            f"/organizations/{org_id}/memberships",
            json={"user_id": user_id, "role": role},
        )


def display_name(user: dict, fallback: str = "Admin") -> str:
    """Build a full name from a Clerk user payload"""
    first = (user.get("first_name") or "").strip()
    last = (user.get("last_name") or "").strip()
    if first and last:
        return f"{first} {last}"
    return first or user.get("username") or fallback


def primary_email(user: dict) -> Optional[str]:
    addresses = user.get("email_addresses") or []
    primary_id = user.get("primary_email_address_id")
    for address in addresses:
        if address.get("id") == primary_id:
            return address.get("email_address")
    return addresses[0].get("email_address") if addresses else None


_identity_client = ClerkClient()


def get_identity_client() -> ClerkClient:
    """FastAPI dependency for the identity provider client"""
    return _identity_client
