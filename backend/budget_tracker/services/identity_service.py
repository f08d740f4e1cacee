"""Resolve the calling user from a Supabase access token."""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class IdentityService:
    """Looks callers up against Supabase Auth; sign-in itself happens elsewhere."""

    def __init__(self, base_url: str, anon_key: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def get_user_id(self, access_token: str) -> Optional[str]:
        """Return the user id for a valid token, None otherwise."""
        try:
            resp = await self._client.get(
                f"{self.base_url}/auth/v1/user",
                headers={
                    "apikey": self.anon_key,
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Supabase auth lookup failed: {e}")
            return None

        if resp.status_code != 200:
            logger.info(f"Supabase rejected access token ({resp.status_code})")
            return None
        try:
            return resp.json().get("id")
        except ValueError:
            return None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
