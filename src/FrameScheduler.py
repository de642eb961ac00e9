"""
Module: FrameScheduler
Description: Per-frame callback queue driven by the host loop. Callbacks requested during
a frame run on the next one, the same contract as a browser's next-animation-frame hook.
Inputs: Callbacks from the engine
Outputs: Integer handles used for cancellation
External Sources: None
"""

from typing import Callable, Dict


class FrameScheduler:
    """Runs registered callbacks once per host frame."""

    def __init__(self) -> None:
        self._callbacks: Dict[int, Callable[[], None]] = {}
        self._running: Dict[int, Callable[[], None]] = {}
        self._next_handle: int = 1
        self.frame_count: int = 0

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def request_frame(self, callback: Callable[[], None]) -> int:
        """Register callback for the next frame and return its handle."""
        handle = self._next_handle
        self._next_handle += 1
        self._callbacks[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        """Drop a pending callback. Unknown handles are ignored."""
        self._callbacks.pop(handle, None)
        # A callback may cancel another one that is due in the same frame
        self._running.pop(handle, None)

    def run_frame(self) -> int:
        """Run every callback registered before this call. Returns how many ran."""
        self.frame_count += 1
        self._running = self._callbacks
        self._callbacks = {}

        ran = 0
        for handle in sorted(self._running):
            callback = self._running.pop(handle, None)
            if callback is None:
                continue
            callback()
            ran += 1
        self._running = {}
        return ran
