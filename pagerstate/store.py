from collections.abc import Callable

from ._logging import logger
from .actions import PagerAction
from .models import PagerList
from .state import PagerReducer

Subscriber = Callable[[PagerList], None]


class PagerStore:
    """
    Holds the current state of one pager and publishes every change.

    Actions are applied one at a time, in the order dispatch() is called.
    """

    def __init__(self, reducer: PagerReducer, initial: PagerList):
        self.reducer = reducer
        self._state = initial
        self._subscribers: list[Subscriber] = []

    @property
    def state(self) -> PagerList:
        return self._state

    def dispatch(self, action: PagerAction) -> PagerList:
        """Applies an action and notifies subscribers if the state changed."""
        previous = self._state
        self._state = self.reducer.reduce(previous, action)
        if self._state != previous:
            self._publish()
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Registers a callback receiving each new state.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self._state)
            except Exception:
                logger.exception(
                    "Pager subscriber failed",
                    extra={"subject": self.reducer.options.subject, "operation": "publish"},
                )
