"""Push channel registry.

Provides singleton access to the push adapter. The in-memory fake is used
unless another adapter is installed with ``set_push_channel``.
"""

from freshcart.notifications.channel.fake_push import FakePushAdapter
from freshcart.notifications.channel.push_port import PushPort

_push_channel: PushPort | None = None


def get_push_channel() -> PushPort:
    """Return the configured push adapter (created on first use)."""
    global _push_channel
    if _push_channel is None:
        _push_channel = FakePushAdapter()
    return _push_channel


def set_push_channel(adapter: PushPort) -> None:
    global _push_channel
    _push_channel = adapter


def reset_channels():
    """Reset the push singleton (useful for testing)."""
    global _push_channel
    _push_channel = None
