"""
Role policy — decides once, before join, whether the local participant
publishes or only views.
"""

from enum import Enum
from typing import NamedTuple

from rtc_call.engine import ClientRole
from rtc_call.models.session import RoleAssignment


class Role(str, Enum):
    PUBLISHER = "publisher"
    VIEWER = "viewer"


class RolePolicy(str, Enum):
    ALWAYS_PUBLISHER = "always_publisher"
    ALWAYS_VIEWER = "always_viewer"
    # Viewer that still renders itself locally unless joining with a
    # personalized (uid-bound) credential.
    VIEWER_WITH_LOCAL_PREVIEW = "viewer_with_local_preview"


class RenderSurfaces(NamedTuple):
    local: bool
    remote: bool


def decide(policy: RolePolicy, personalized_credential: bool = False) -> Role:
    if policy == RolePolicy.ALWAYS_PUBLISHER:
        return Role.PUBLISHER
    if policy == RolePolicy.ALWAYS_VIEWER:
        return Role.VIEWER
    return Role.VIEWER if personalized_credential else Role.PUBLISHER


def assignment(role: Role) -> RoleAssignment:
    return RoleAssignment(is_host=role == Role.PUBLISHER, is_viewer=role == Role.VIEWER)


def client_role(role: Role) -> ClientRole:
    """Role declared to the engine before join."""
    return ClientRole.BROADCASTER if role == Role.PUBLISHER else ClientRole.AUDIENCE


def render_surfaces(role: Role) -> RenderSurfaces:
    """Publishers show their own surface; viewers show the remote ones."""
    return RenderSurfaces(local=role == Role.PUBLISHER, remote=role == Role.VIEWER)
