"""Cooperative cancellation shared by the workers of a pool."""

import anyio


class ConsumerContext:
    """A cancellation token with idempotent cancel and broadcast wake-up.

    Workers poll `cancelled` at the top of each iteration and use `wait` for
    their idle delay, so a cancel never interrupts an in-flight receive or
    handler call. Cancelling a context also cancels every child derived from it.
    Must be cancelled from the event loop thread.
    """

    def __init__(self, parent: "ConsumerContext | None" = None) -> None:
        self._cancelled = False
        self._event: anyio.Event | None = None
        self._children: list[ConsumerContext] = []
        self._parent = parent

        if parent is not None:
            parent._children.append(self)
            self._cancelled = parent.cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def child(self) -> "ConsumerContext":
        """Derives a context that is cancelled together with this one."""
        return ConsumerContext(parent=self)

    def detach(self) -> None:
        """Unlinks this context from its parent, which stops cancelling it."""
        if self._parent is not None:
            self._parent._children.remove(self)
            self._parent = None

    def cancel(self) -> None:
        if self._cancelled:
            return

        self._cancelled = True
        if self._event is not None:
            self._event.set()

        for child in self._children:
            child.cancel()

    async def wait(self, timeout: float | None = None) -> bool:
        """Blocks until cancellation or until the timeout elapses.

        Returns:
            True if the context is cancelled.
        """
        if self._cancelled:
            return True

        if self._event is None:
            self._event = anyio.Event()

        with anyio.move_on_after(timeout):
            await self._event.wait()

        return self._cancelled
