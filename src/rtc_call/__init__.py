"""
rtc-call — client-side session controller for real-time audio/video calls.

Channel join/leave lifecycle, remote participant roster, publisher/viewer
role policy and credential acquisition on top of a pluggable RTC engine.
"""

from rtc_call.client import AsyncCallClient, CallClient
from rtc_call.config import CallConfig
from rtc_call.credentials import CredentialProvider
from rtc_call.errors import (
    ConfigError,
    CredentialUnavailable,
    EngineError,
    EngineWarning,
    InvalidTransition,
    RtcCallError,
)
from rtc_call.identity import IdentityAllocator
from rtc_call.models.events import EngineEvent
from rtc_call.models.session import ChannelDescriptor, Credential, RoleAssignment, SessionSnapshot, SessionStatus
from rtc_call.roles import Role, RolePolicy
from rtc_call.roster import Roster
from rtc_call.session import SessionController

__version__ = "0.1.0"
__all__ = [
    "AsyncCallClient",
    "CallClient",
    "CallConfig",
    "CredentialProvider",
    "IdentityAllocator",
    "Roster",
    "SessionController",
    "ChannelDescriptor",
    "Credential",
    "RoleAssignment",
    "SessionSnapshot",
    "SessionStatus",
    "Role",
    "RolePolicy",
    "EngineEvent",
    "RtcCallError",
    "CredentialUnavailable",
    "EngineError",
    "EngineWarning",
    "InvalidTransition",
    "ConfigError",
]
