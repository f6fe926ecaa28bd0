"""
Call configuration.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from rtc_call.engine import VideoEncoderConfiguration, VideoFrameRate
from rtc_call.errors import ConfigError
from rtc_call.identity import DEFAULT_UID_LENGTH, MAX_UID_LENGTH
from rtc_call.models.session import ChannelDescriptor
from rtc_call.roles import RolePolicy
from rtc_call.transport.http import DEFAULT_ISSUER_URL

MOBILE_PLATFORMS = {"android", "ios"}


class CallConfig(BaseModel):
    app_identity: str = Field(min_length=1)
    channel_name: str = Field(min_length=1)
    issuer_url: str = DEFAULT_ISSUER_URL
    # Personalized credentials are bound to a locally allocated uid.
    personalized_credential: bool = True
    uid_length: int = Field(default=DEFAULT_UID_LENGTH, ge=1, le=MAX_UID_LENGTH)
    role_policy: RolePolicy = RolePolicy.ALWAYS_PUBLISHER
    frame_rate: VideoFrameRate = VideoFrameRate.FPS_30
    platform: Optional[str] = None

    def descriptor(self) -> ChannelDescriptor:
        return ChannelDescriptor(channel_name=self.channel_name, app_identity=self.app_identity)

    def video(self) -> VideoEncoderConfiguration:
        return VideoEncoderConfiguration(frame_rate=self.frame_rate)

    @property
    def is_mobile(self) -> bool:
        return (self.platform or "").lower() in MOBILE_PLATFORMS

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "CallConfig":
        """Build from RTC_* environment variables."""
        env = os.environ if environ is None else environ
        app_id = env.get("RTC_APP_ID")
        channel = env.get("RTC_CHANNEL")
        if not app_id or not channel:
            raise ConfigError("RTC_APP_ID and RTC_CHANNEL must be set")

        values: dict[str, object] = {"app_identity": app_id, "channel_name": channel}
        if env.get("RTC_ISSUER_URL"):
            values["issuer_url"] = env["RTC_ISSUER_URL"]
        if env.get("RTC_ROLE_POLICY"):
            values["role_policy"] = env["RTC_ROLE_POLICY"]
        if env.get("RTC_PERSONALIZED"):
            values["personalized_credential"] = env["RTC_PERSONALIZED"].lower() in ("1", "true", "yes")
        if env.get("RTC_PLATFORM"):
            values["platform"] = env["RTC_PLATFORM"]
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigError(f"Invalid call configuration: {e}") from e
