from threading import Lock


class ChannelEnableState:
    """
    Shared "channels enabled" flag.

    Connect, homing and diagnostics callbacks write it, the force limit gate
    reads it. All access goes through the lock so callbacks running on a
    multi-threaded executor see a consistent value.
    """

    def __init__(self, enabled: bool = False):
        self._enabled = bool(enabled)
        self._lock = Lock()

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def set(self, enabled: bool):
        with self._lock:
            self._enabled = bool(enabled)

    def enable(self):
        self.set(True)

    def disable(self):
        self.set(False)

    def disable_and_get_previous(self) -> bool:
        """Disable and report whether the channels were enabled before."""
        with self._lock:
            previous = self._enabled
            self._enabled = False
            return previous

    def __bool__(self):
        return self.enabled

    def __repr__(self):
        return f"ChannelEnableState(enabled={self.enabled})"
