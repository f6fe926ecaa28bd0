"""
AsyncCallClient / CallClient — wire allocator, credential provider and
session controller together for one channel.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from rtc_call.config import CallConfig
from rtc_call.credentials import CredentialProvider
from rtc_call.engine import EngineFactory
from rtc_call.identity import IdentityAllocator, default_allocator
from rtc_call.models.session import Credential, ParticipantId, SessionSnapshot
from rtc_call.roles import RenderSurfaces, decide, render_surfaces
from rtc_call.session import SessionController
from rtc_call.transport.http import HttpClient

logger = logging.getLogger(__name__)

PermissionRequest = Callable[[], Awaitable[Any]]


class AsyncCallClient:
    """Async call client (primary)."""

    def __init__(
        self,
        config: CallConfig,
        engine_factory: EngineFactory,
        permissions: Optional[PermissionRequest] = None,
        http: Optional[HttpClient] = None,
        allocator: Optional[IdentityAllocator] = None,
    ):
        self._config = config
        self._permissions = permissions
        self.http = http or HttpClient(base_url=config.issuer_url)
        self.credentials = CredentialProvider(self.http)
        self.allocator = allocator or default_allocator(config.uid_length)
        self.role = decide(config.role_policy, config.personalized_credential)
        self.controller = SessionController(
            config.descriptor(),
            self.role,
            engine_factory,
            video=config.video(),
        )
        self._credential_task: Optional[asyncio.Task[Optional[Credential]]] = None
        self._setup_done = False
        self._permissions_asked = False

    @property
    def local_uid(self) -> Optional[ParticipantId]:
        return self.controller.local_uid

    @property
    def render_surfaces(self) -> RenderSurfaces:
        return render_surfaces(self.role)

    async def setup(self) -> None:
        """Permissions, uid, background credential fetch, engine init."""
        if self._setup_done:
            logger.warning("setup() already ran")
            return

        if self._permissions is not None and self._config.is_mobile and not self._permissions_asked:
            self._permissions_asked = True
            try:
                result = await self._permissions()
                logger.info(f"Permission request on {self._config.platform}: {result}")
            except Exception as e:
                logger.warning(f"Permission request on {self._config.platform} failed: {e}")

        if self._credential_task is None:
            uid: Optional[ParticipantId] = None
            if self._config.personalized_credential:
                uid = self.allocator.allocate()
                self.controller.set_local_uid(uid)
            self.refresh_credential(uid)

        await self.controller.initialize()
        self._setup_done = True

    def refresh_credential(self, uid: Optional[ParticipantId] = None) -> "asyncio.Task[Optional[Credential]]":
        """Start a background credential fetch; the result lands on the controller."""
        self.controller.begin_credential_fetch()
        self._credential_task = self.credentials.request_credential(
            self._config.channel_name, uid, on_result=self.controller.finish_credential_fetch,
        )
        return self._credential_task

    async def wait_for_credential(self) -> Optional[Credential]:
        """Await the outstanding fetch, if any. No timeout."""
        if self._credential_task is not None:
            await self._credential_task
        return self.controller.credential

    async def start_call(self) -> bool:
        return await self.controller.start_call()

    async def end_call(self) -> bool:
        return await self.controller.end_call()

    def snapshot(self) -> SessionSnapshot:
        return self.controller.snapshot()

    async def close(self) -> None:
        """Leave any live call and release the engine subscription and HTTP pool.
        An unfinished credential fetch is abandoned.
        """
        await self.controller.end_call()
        self.controller.detach()
        if self._credential_task is not None and not self._credential_task.done():
            self._credential_task.cancel()
        await self.http.close()


class CallClient:
    """Sync wrapper around AsyncCallClient. Runs the event loop internally.

    The background credential fetch only advances while one of the blocking
    calls below is running; use wait_for_credential() before start_call().
    """

    def __init__(self, config: CallConfig, engine_factory: EngineFactory, **kwargs: Any):
        self._async = AsyncCallClient(config, engine_factory, **kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def controller(self) -> SessionController:
        return self._async.controller

    @property
    def local_uid(self) -> Optional[ParticipantId]:
        return self._async.local_uid

    def setup(self) -> None:
        self._run(self._async.setup())

    def wait_for_credential(self) -> Optional[Credential]:
        return self._run(self._async.wait_for_credential())

    def start_call(self) -> bool:
        return self._run(self._async.start_call())

    def end_call(self) -> bool:
        return self._run(self._async.end_call())

    def snapshot(self) -> SessionSnapshot:
        return self._async.snapshot()

    def close(self) -> None:
        try:
            self._run(self._async.close())
        finally:
            self._loop.close()
