"""Channel adapter registry — the hosted function that delivers emails.

Provides singleton access to the function execution adapter. Uses the fake
adapter by default; a real backend SDK adapter can be installed at startup
with set_channel().
"""

from notifications.channel.function_port import FunctionExecutionPort

_channel_instance: FunctionExecutionPort | None = None


def get_channel() -> FunctionExecutionPort:
    """Return the configured function execution adapter (singleton)."""
    global _channel_instance
    if _channel_instance is None:
        from notifications.channel.fake_function import FakeFunctionAdapter

        _channel_instance = FakeFunctionAdapter()
    return _channel_instance


def set_channel(adapter: FunctionExecutionPort) -> None:
    """Install a specific adapter (useful for tests and production wiring)."""
    global _channel_instance
    _channel_instance = adapter


def reset_channels():
    """Reset the channel singleton (useful for testing)."""
    global _channel_instance
    _channel_instance = None
