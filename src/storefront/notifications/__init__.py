"""Email channel selection.

``get_email_channel()`` returns a process-wide adapter chosen by the
``EMAIL_ADAPTER`` environment variable. Only the in-memory ``fake`` adapter
ships with the storefront; tests and deployments swap in their own with
``set_email_channel()``.
"""

import os

from storefront.notifications.email_port import EmailPort

_current_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    global _current_channel
    if _current_channel is None:
        adapter = os.getenv("EMAIL_ADAPTER", "fake").lower()
        if adapter != "fake":
            raise ValueError(f"Unknown email adapter: {adapter}")

        from storefront.notifications.fake_email import FakeEmailAdapter

        _current_channel = FakeEmailAdapter()
    return _current_channel


def set_email_channel(channel: EmailPort) -> None:
    """Override the active email channel (useful for tests)."""
    global _current_channel
    _current_channel = channel


def reset_email_channel() -> None:
    global _current_channel
    _current_channel = None
