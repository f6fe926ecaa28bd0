"""
Credential provider — fetches channel join tokens from the issuing service.

GET <issuer>/access_token?channel=<name>[&uid=<id>]  ->  {"token": "..."}
"""

import asyncio
import logging
from typing import Callable, Optional

import httpx

from rtc_call.errors import CredentialUnavailable, RtcCallError
from rtc_call.models.session import Credential, ParticipantId
from rtc_call.transport.http import HttpClient

logger = logging.getLogger(__name__)

ACCESS_TOKEN_PATH = "/access_token"


class CredentialProvider:
    def __init__(self, http: HttpClient):
        self._http = http

    async def fetch_credential(self, channel: str, uid: Optional[ParticipantId] = None) -> Credential:
        """Request a token for `channel`, personalized to `uid` when given."""
        params = {"channel": channel}
        if uid is not None:
            params["uid"] = str(uid)
        try:
            body = await self._http.get(ACCESS_TOKEN_PATH, params=params)
        except httpx.HTTPError as e:
            raise CredentialUnavailable(f"Failed to reach credential issuer: {e}") from e
        except RtcCallError as e:
            raise CredentialUnavailable(f"Credential issuer rejected request: {e}", e.details) from e

        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise CredentialUnavailable("Credential issuer response has no token field")
        return Credential(token=token, channel=channel, uid=uid)

    def request_credential(
        self,
        channel: str,
        uid: Optional[ParticipantId] = None,
        on_result: Optional[Callable[[Optional[Credential]], None]] = None,
    ) -> "asyncio.Task[Optional[Credential]]":
        """Fire-and-forget fetch. Failures are logged and resolve to None.

        `on_result` is called with the credential, or None on failure, once the
        request settles. Must be called with a running event loop.
        """

        async def _fetch() -> Optional[Credential]:
            credential: Optional[Credential] = None
            try:
                credential = await self.fetch_credential(channel, uid)
                logger.info(f"Credential issued for channel {channel!r}")
            except CredentialUnavailable as e:
                logger.error(f"Error fetching credential: {e}")
            if on_result is not None:
                on_result(credential)
            return credential

        return asyncio.get_running_loop().create_task(_fetch())
