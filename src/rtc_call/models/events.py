"""
Engine event names.
"""


class EngineEvent:
    """Events subscribed on the engine adapter."""
    WARNING = "Warning"
    ERROR = "Error"
    USER_JOINED = "UserJoined"              # (uid, elapsed)
    USER_OFFLINE = "UserOffline"            # (uid, reason)
    JOIN_CHANNEL_SUCCESS = "JoinChannelSuccess"  # (channel, uid, elapsed)

    ALL = (WARNING, ERROR, USER_JOINED, USER_OFFLINE, JOIN_CHANNEL_SUCCESS)


class UserOfflineReason:
    QUIT = 0
    DROPPED = 1
    BECOME_AUDIENCE = 2

    NAMES = {QUIT: "quit", DROPPED: "dropped", BECOME_AUDIENCE: "become_audience"}
