"""
Session controller — owns the call state machine.

Status flow:
    IDLE -> INITIALIZING -> IDLE                 (engine created and configured)
    IDLE <-> AWAITING_CREDENTIAL                 (credential fetch outstanding)
    IDLE -> JOINING -> JOINED                    (start_call, then JoinChannelSuccess)
    JOINING/JOINED -> LEAVING -> IDLE            (end_call)

User calls arrive on the event loop; engine events may arrive on any thread.
Every read-modify-write of status, credential, local uid and roster happens
under one lock, and the lock is never held across an await.
"""

import logging
import threading
from typing import Any, Callable, Optional

from rtc_call.engine import ChannelProfile, EngineAdapter, EngineFactory, VideoEncoderConfiguration
from rtc_call.errors import EngineError, InvalidTransition
from rtc_call.models.events import EngineEvent, UserOfflineReason
from rtc_call.models.session import (
    ENGINE_ASSIGNED_UID,
    ChannelDescriptor,
    Credential,
    ParticipantId,
    RoleAssignment,
    SessionSnapshot,
    SessionStatus,
)
from rtc_call.roles import Role, assignment, client_role
from rtc_call.roster import Roster

logger = logging.getLogger(__name__)

CALL_STATUSES = {SessionStatus.JOINING, SessionStatus.JOINED}
READY_STATUSES = {SessionStatus.IDLE, SessionStatus.AWAITING_CREDENTIAL}


class SessionController:
    def __init__(
        self,
        descriptor: ChannelDescriptor,
        role: Role,
        engine_factory: EngineFactory,
        video: Optional[VideoEncoderConfiguration] = None,
    ):
        self._descriptor = descriptor
        self._role = role
        self._engine_factory = engine_factory
        self._video = video or VideoEncoderConfiguration()

        self._lock = threading.RLock()
        self._status = SessionStatus.IDLE
        self._engine: Optional[EngineAdapter] = None
        self._init_started = False
        self._credential: Optional[Credential] = None
        self._credential_pending = False
        self._local_uid: Optional[ParticipantId] = None
        self._roster = Roster()
        self._listeners: list[Callable[[], None]] = []

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def descriptor(self) -> ChannelDescriptor:
        return self._descriptor

    @property
    def role(self) -> Role:
        return self._role

    @property
    def role_assignment(self) -> RoleAssignment:
        return assignment(self._role)

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    @property
    def local_uid(self) -> Optional[ParticipantId]:
        return self._local_uid

    @property
    def roster(self) -> Roster:
        return self._roster

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    def snapshot(self) -> SessionSnapshot:
        """Everything the presentation layer renders from."""
        with self._lock:
            return SessionSnapshot(
                status=self._status,
                roster=self._roster.snapshot(),
                role=self.role_assignment,
                channel_name=self._descriptor.channel_name,
                local_uid=self._local_uid,
                has_credential=self._credential is not None,
            )

    def _set_status(self, status: SessionStatus) -> None:
        if status != self._status:
            logger.info(f"Session {self._descriptor.channel_name!r}: {self._status.value} -> {status.value}")
            self._status = status

    def _resting_status(self) -> SessionStatus:
        return SessionStatus.AWAITING_CREDENTIAL if self._credential_pending else SessionStatus.IDLE

    def _ignore(self, operation: str, reason: str = "") -> None:
        logger.warning(str(InvalidTransition(operation, self._status.value, reason)))

    async def initialize(self) -> None:
        """Create the engine, configure video and role, subscribe to events.

        Only the first call does anything.
        """
        with self._lock:
            if self._init_started:
                self._ignore("initialize", "engine already initialized")
                return
            self._init_started = True
            self._set_status(SessionStatus.INITIALIZING)

        try:
            engine = await self._engine_factory(self._descriptor.app_identity)
            engine.set_video_encoder_configuration(self._video)
            await engine.enable_video()
            engine.set_channel_profile(ChannelProfile.LIVE_BROADCASTING)
            engine.set_client_role(client_role(self._role))
            handlers: dict[str, Callable[..., None]] = {
                EngineEvent.WARNING: self.on_warning,
                EngineEvent.ERROR: self.on_error,
                EngineEvent.USER_JOINED: self.on_remote_joined,
                EngineEvent.USER_OFFLINE: self.on_remote_left,
                EngineEvent.JOIN_CHANNEL_SUCCESS: self.on_local_join_success,
            }
            listeners = [engine.add_listener(event, handler) for event, handler in handlers.items()]
        except Exception as e:
            with self._lock:
                self._set_status(self._resting_status())
            raise EngineError(f"Engine setup failed: {e}") from e

        with self._lock:
            self._engine = engine
            self._listeners = listeners
            self._set_status(self._resting_status())
        logger.info(f"Engine ready as {self._role.value} for channel {self._descriptor.channel_name!r}")

    def begin_credential_fetch(self) -> None:
        with self._lock:
            self._credential_pending = True
            if self._status == SessionStatus.IDLE:
                self._set_status(SessionStatus.AWAITING_CREDENTIAL)

    def finish_credential_fetch(self, credential: Optional[Credential]) -> None:
        """Settle an outstanding fetch. None means the fetch failed."""
        with self._lock:
            self._credential_pending = False
            if credential is not None:
                self.set_credential(credential)
            if self._status == SessionStatus.AWAITING_CREDENTIAL:
                self._set_status(SessionStatus.IDLE)

    def set_credential(self, credential: Optional[Credential]) -> None:
        with self._lock:
            self._credential = credential
            if credential is not None and credential.uid is not None:
                self._local_uid = credential.uid

    def set_local_uid(self, uid: Optional[ParticipantId]) -> None:
        with self._lock:
            self._local_uid = uid

    async def start_call(self) -> bool:
        """Join the channel. Returns False, changing nothing, when a join
        is not possible right now.
        """
        with self._lock:
            if self._engine is None:
                self._ignore("start_call", "engine not initialized")
                return False
            if self._status not in READY_STATUSES:
                self._ignore("start_call")
                return False
            if self._credential is None:
                self._ignore("start_call", "credential not yet available")
                return False
            engine = self._engine
            token = self._credential.token
            uid = self._local_uid if self._local_uid is not None else ENGINE_ASSIGNED_UID
            self._roster.clear()
            self._set_status(SessionStatus.JOINING)

        try:
            await engine.join_channel(token, self._descriptor.channel_name, None, uid)
        except Exception as e:
            logger.error(f"Join channel {self._descriptor.channel_name!r} failed: {e}")
            with self._lock:
                if self._status == SessionStatus.JOINING:
                    self._set_status(self._resting_status())
            return False
        return True

    async def end_call(self) -> bool:
        """Leave the channel. Roster is always cleared and status ends at IDLE,
        even when the engine's leave fails or a credential fetch is pending.
        """
        with self._lock:
            if self._status not in CALL_STATUSES or self._engine is None:
                self._ignore("end_call", "no call in progress")
                self._roster.clear()
                if self._status in READY_STATUSES:
                    self._set_status(SessionStatus.IDLE)
                return False
            engine = self._engine
            self._set_status(SessionStatus.LEAVING)

        try:
            await engine.leave_channel()
        except Exception as e:
            logger.error(f"Leave channel {self._descriptor.channel_name!r} failed: {e}")
        finally:
            with self._lock:
                self._roster.clear()
                self._set_status(SessionStatus.IDLE)
        return True

    def detach(self) -> None:
        """Unsubscribe from engine events. The engine itself is kept."""
        with self._lock:
            listeners, self._listeners = self._listeners, []
        for remove in listeners:
            remove()

    def on_warning(self, code: Any) -> None:
        logger.warning(f"Engine warning {code}")

    def on_error(self, code: Any) -> None:
        logger.error(f"Engine error {code}")

    def on_remote_joined(self, uid: ParticipantId, elapsed: int = 0) -> None:
        with self._lock:
            added = self._roster.add(uid)
        logger.debug(f"UserJoined {uid} elapsed={elapsed} new={added}")

    def on_remote_left(self, uid: ParticipantId, reason: Optional[int] = None) -> None:
        with self._lock:
            removed = self._roster.remove(uid)
        logger.debug(f"UserOffline {uid} reason={UserOfflineReason.NAMES.get(reason, reason)} present={removed}")

    def on_local_join_success(self, channel: str, uid: ParticipantId, elapsed: int = 0) -> None:
        with self._lock:
            if self._status == SessionStatus.JOINED:
                return
            if self._status != SessionStatus.JOINING:
                self._ignore("join_success", f"channel={channel} uid={uid}")
                return
            if uid != ENGINE_ASSIGNED_UID and uid != self._local_uid:
                logger.info(f"Engine assigned uid {uid} (requested {self._local_uid})")
                self._local_uid = uid
            self._roster.remove(uid)
            self._set_status(SessionStatus.JOINED)
        logger.info(f"JoinChannelSuccess {channel} uid={uid} elapsed={elapsed}")
