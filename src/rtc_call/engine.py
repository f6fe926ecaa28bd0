"""
Engine adapter contract.

The real-time engine is not implemented here. Any object matching
`EngineAdapter` can be driven by the session controller; it is obtained from
an async `EngineFactory` called with the app identity.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol

from pydantic import BaseModel


class ChannelProfile(int, Enum):
    COMMUNICATION = 0
    LIVE_BROADCASTING = 1
    GAME = 2


class ClientRole(int, Enum):
    BROADCASTER = 1
    AUDIENCE = 2


class VideoFrameRate(int, Enum):
    FPS_1 = 1
    FPS_7 = 7
    FPS_10 = 10
    FPS_15 = 15
    FPS_24 = 24
    FPS_30 = 30
    FPS_60 = 60


class VideoEncoderConfiguration(BaseModel):
    frame_rate: VideoFrameRate = VideoFrameRate.FPS_30
    width: Optional[int] = None
    height: Optional[int] = None
    bitrate: Optional[int] = None


class EngineAdapter(Protocol):
    def set_video_encoder_configuration(self, config: VideoEncoderConfiguration) -> Any: ...

    async def enable_video(self) -> Any: ...

    def set_channel_profile(self, profile: ChannelProfile) -> Any: ...

    def set_client_role(self, role: ClientRole) -> Any: ...

    async def join_channel(self, token: Optional[str], channel: str, info: Optional[str], uid: int) -> Any:
        """Suspends until the engine accepts or rejects the join request.
        Success of the join itself is reported by the JoinChannelSuccess event.
        """
        ...

    async def leave_channel(self) -> Any: ...

    def add_listener(self, event: str, handler: Callable[..., None]) -> Callable[[], None]:
        """Subscribe to an engine event. Returns a cleanup function."""
        ...


EngineFactory = Callable[[str], Awaitable[EngineAdapter]]
