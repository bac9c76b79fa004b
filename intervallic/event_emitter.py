import inspect
import logging
import typing


logger = logging.getLogger(__name__)

CallbackType = typing.Callable[..., typing.Any]

PAIRS_CHANGED = "pairs_changed"
INTERVALS_CHANGED = "intervals_changed"


class EventEmitter:

	"""
	Synchronous multi-listener notification.

	Listeners are called in registration order on the caller's thread.  A
	listener added or removed while an event is being delivered takes effect
	from the next emit.
	"""

	def __init__ (self) -> None:

		"""Initialize an empty event registry."""

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}


	def on (self, event_name: str, callback: CallbackType) -> typing.Callable[[], None]:

		"""
		Register a callback for an event name.

		Returns a function that unregisters it again.
		"""

		self._listeners.setdefault(event_name, []).append(callback)

		def unsubscribe () -> None:
			if self.has_listener(event_name, callback):
				self.off(event_name, callback)

		return unsubscribe

	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if not self.has_listener(event_name, callback):
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)

	def has_listener (self, event_name: str, callback: CallbackType) -> bool:

		"""True if ``callback`` is registered for ``event_name``."""

		return callback in self._listeners.get(event_name, [])

	def listener_count (self, event_name: str) -> int:

		"""Number of callbacks registered for ``event_name``."""

		return len(self._listeners.get(event_name, []))


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Call every listener for ``event_name`` with the given arguments.
		"""

		for callback in list(self._listeners.get(event_name, [])):

			if inspect.iscoroutinefunction(callback):
				raise ValueError(f"Async callback registered for {event_name!r}; listeners must be plain functions")

			callback(*args, **kwargs)


	def clear (self) -> None:

		"""Drop every listener for every event."""

		count = sum(len(callbacks) for callbacks in self._listeners.values())
		self._listeners.clear()

		if count:
			logger.debug(f"Released {count} listener(s)")
