"""Shared fakes: a recording engine adapter and an issuer transport."""

from typing import Any, Callable, Optional

import httpx
import pytest

from rtc_call.models.session import ChannelDescriptor
from rtc_call.transport.http import HttpClient

ISSUER_URL = "https://issuer.test"


class FakeEngine:
    """In-memory engine adapter. Records calls; tests fire events with emit()."""

    def __init__(self, app_identity: str):
        self.app_identity = app_identity
        self.calls: list[tuple[Any, ...]] = []
        self.listeners: dict[str, list[Callable[..., None]]] = {}
        self.join_error: Optional[Exception] = None
        self.leave_error: Optional[Exception] = None

    def set_video_encoder_configuration(self, config: Any) -> None:
        self.calls.append(("set_video_encoder_configuration", config))

    async def enable_video(self) -> None:
        self.calls.append(("enable_video",))

    def set_channel_profile(self, profile: Any) -> None:
        self.calls.append(("set_channel_profile", profile))

    def set_client_role(self, role: Any) -> None:
        self.calls.append(("set_client_role", role))

    async def join_channel(self, token: Optional[str], channel: str, info: Optional[str], uid: int) -> None:
        self.calls.append(("join_channel", token, channel, info, uid))
        if self.join_error:
            raise self.join_error

    async def leave_channel(self) -> None:
        self.calls.append(("leave_channel",))
        if self.leave_error:
            raise self.leave_error

    def add_listener(self, event: str, handler: Callable[..., None]) -> Callable[[], None]:
        self.listeners.setdefault(event, []).append(handler)

        def remove() -> None:
            self.listeners[event].remove(handler)
        return remove

    def emit(self, event: str, *args: Any) -> None:
        for handler in list(self.listeners.get(event, [])):
            handler(*args)

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == name]


class EngineFactory:
    def __init__(self) -> None:
        self.engines: list[FakeEngine] = []
        self.error: Optional[Exception] = None

    async def __call__(self, app_identity: str) -> FakeEngine:
        if self.error:
            raise self.error
        engine = FakeEngine(app_identity)
        self.engines.append(engine)
        return engine

    @property
    def engine(self) -> FakeEngine:
        return self.engines[-1]


def issuer_http(handler: Callable[[httpx.Request], Any]) -> HttpClient:
    return HttpClient(base_url=ISSUER_URL, transport=httpx.MockTransport(handler))


def token_handler(token: str = "abc", seen: Optional[list[httpx.Request]] = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(200, json={"token": token})
    return handler


@pytest.fixture
def engine_factory() -> EngineFactory:
    return EngineFactory()


@pytest.fixture
def descriptor() -> ChannelDescriptor:
    return ChannelDescriptor(channel_name="channel-x", app_identity="test-app")
