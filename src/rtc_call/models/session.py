"""
Session models — status, channel descriptor, credential and the snapshot
handed to the presentation layer.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ParticipantId = int

# Passing 0 to join lets the engine assign the local uid.
ENGINE_ASSIGNED_UID: ParticipantId = 0


class SessionStatus(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    AWAITING_CREDENTIAL = "awaiting_credential"
    JOINING = "joining"
    JOINED = "joined"
    LEAVING = "leaving"


class ChannelDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel_name: str = Field(min_length=1)
    app_identity: str = Field(min_length=1)


class Credential(BaseModel):
    """Join token issued for a channel (and, when personalized, a uid)."""
    model_config = ConfigDict(frozen=True)

    token: str
    channel: str
    uid: Optional[ParticipantId] = None

    def __repr__(self) -> str:
        return f"Credential(channel={self.channel!r}, uid={self.uid!r})"


class RoleAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_host: bool
    is_viewer: bool


class SessionSnapshot(BaseModel):
    status: SessionStatus
    roster: list[ParticipantId] = []
    role: RoleAssignment
    channel_name: str
    local_uid: Optional[ParticipantId] = None
    has_credential: bool = False

    @property
    def joined(self) -> bool:
        return self.status == SessionStatus.JOINED
