"""Shared self-inhibition flag between the driver and the pipeline runner."""

import threading


class InhibitionFlag:
    """
    Boolean cell shared by the aggregator and the pipeline runner.

    The aggregator sets it whenever it hands out an action; the runner clears it
    once the triggered batch has finished. While it is set, new changes are
    dropped instead of queued.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def set(self) -> None:
        self._event.set()

    def clear(self) -> None:
        self._event.clear()

    def is_set(self) -> bool:
        return self._event.is_set()

    def __bool__(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"InhibitionFlag({self._event.is_set()})"
