"""
Exception types raised by the Devnet operator.
"""


class RyogokuError(Exception):
    """Base exception for all operator errors."""
    pass


class CrdNotInstalledError(RyogokuError):
    """Raised at startup when the Devnet resource type cannot be listed."""

    def __init__(self) -> None:
        super().__init__("ryogoku CRDs are not installed")


class FinalizerError(RyogokuError):
    """
    Wraps an error raised while applying or cleaning up a devnet.

    The original exception is kept as `__cause__` and in `cause`.
    """

    def __init__(self, event: str, name: str, namespace: str, cause: BaseException) -> None:
        self.event = event
        self.name = name
        self.namespace = namespace
        self.cause = cause
        super().__init__(
            f"Finalizer {event} of devnet '{namespace}/{name}' failed: {cause}"
        )
