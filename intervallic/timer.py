"""Cancellable one-shot timers on the running asyncio loop.

A :class:`CancellableTimer` owns at most one pending ``loop.call_later``
handle.  Starting it again replaces the pending handle, which is exactly
what a debounce needs: every keystroke pushes the deadline back.

A delay of zero (or less) runs the callback synchronously inside
:meth:`CancellableTimer.start`, so components configured without a window
behave deterministically even where no event loop is running.
"""

import asyncio
import typing


class CancellableTimer:

	"""
	A resettable one-shot timer.

	Example:
		```python
		timer = CancellableTimer(0.05, flush_editor)
		timer.start()   # schedules
		timer.start()   # reschedules, the first deadline is dropped
		timer.cancel()  # nothing fires
		```
	"""

	def __init__ (self, delay_seconds: float, callback: typing.Callable[[], typing.Any], loop: typing.Optional[asyncio.AbstractEventLoop] = None) -> None:

		"""Store the delay and callback; nothing is scheduled yet."""

		self.delay_seconds = delay_seconds
		self._callback = callback
		self._loop = loop
		self._handle: typing.Optional[asyncio.TimerHandle] = None

	@property
	def pending (self) -> bool:

		"""True while a callback is scheduled and has not yet fired."""

		return self._handle is not None


	def start (self) -> None:

		"""
		Schedule the callback, replacing any pending one.

		Raises ``RuntimeError`` when a positive delay is requested with no
		event loop available to run it.
		"""

		self.cancel()

		if self.delay_seconds <= 0:
			self._callback()
			return

		loop = self._loop or asyncio.get_running_loop()
		self._handle = loop.call_later(self.delay_seconds, self._fire)

	def reset (self) -> None:

		"""Alias for :meth:`start` - push the deadline back."""

		self.start()

	def cancel (self) -> bool:

		"""Drop the pending callback.  Returns True if one was pending."""

		if self._handle is None:
			return False

		self._handle.cancel()
		self._handle = None

		return True

	def flush (self) -> bool:

		"""Run a pending callback now instead of waiting.  Returns True if one ran."""

		if not self.cancel():
			return False

		self._callback()

		return True


	def _fire (self) -> None:

		"""Clear the handle and run the callback."""

		self._handle = None
		self._callback()
