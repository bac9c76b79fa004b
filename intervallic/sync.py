"""Editor <-> store synchronisation without feedback loops.

Writing to the store notifies listeners, and writing to the editor makes it
emit pairs, so a naive two-way binding recurses forever.  The
:class:`SyncManager` keeps a single explicit :class:`SyncState` token:

- ``IDLE``     - every entry point is accepted.
- ``PENDING``  - an editor change is waiting out the debounce window.
  Further keystrokes push the deadline back; every other write is refused.
- ``SYNCING``  - a transfer is running right now.  Anything that re-enters
  is refused with ``False``.

Refused calls are not queued - the caller retries once the current
transfer has finished.
"""

import contextlib
import enum
import logging
import typing

import intervallic.constants
import intervallic.editor
import intervallic.pair_store
import intervallic.timer

from intervallic.pairs import Pair


logger = logging.getLogger(__name__)


class SyncState (enum.Enum):

	IDLE = "idle"
	PENDING = "pending"
	SYNCING = "syncing"


SyncCompleteCallback = typing.Callable[[str, typing.List[Pair]], typing.Any]


class SyncManager:

	"""
	Mediates between one :class:`~intervallic.editor.DualEditor` and one
	:class:`~intervallic.pair_store.PairStore`.

	Parameters:
		editor: The text surfaces.
		store: The canonical pair list.
		on_sync_complete: Called with ``(source, pairs)`` after each transfer;
			``source`` is ``"editor"``, ``"state"`` or ``"clear"``.
		debounce_ms: Window that coalesces keystrokes into one store update.
			Zero transfers synchronously.
	"""

	def __init__ (
		self,
		editor: intervallic.editor.DualEditor,
		store: intervallic.pair_store.PairStore,
		on_sync_complete: typing.Optional[SyncCompleteCallback] = None,
		debounce_ms: int = intervallic.constants.DEFAULT_DEBOUNCE_MS
	) -> None:

		"""Join ``editor`` and ``store``; nothing is pending yet."""

		if editor is None or store is None:
			raise ValueError("SyncManager needs both an editor and a store")

		self.editor = editor
		self.store = store
		self.on_sync_complete = on_sync_complete

		self.state = SyncState.IDLE
		self._debounce = intervallic.timer.CancellableTimer(debounce_ms / 1000.0, self._flush_editor)

	@property
	def is_syncing (self) -> bool:

		"""True while a transfer is pending or running."""

		return self.state is not SyncState.IDLE

	@contextlib.contextmanager
	def _syncing (self) -> typing.Iterator[None]:

		"""Hold the ``SYNCING`` state for the duration of the block."""

		self.state = SyncState.SYNCING

		try:
			yield
		finally:
			self.state = SyncState.IDLE

	def _refuse (self, operation: str) -> bool:

		"""Log a refused call and return False."""

		logger.debug(f"{operation} refused while {self.state.value}")

		return False

	def _complete (self, source: str, pairs: typing.List[Pair]) -> None:

		"""Report a finished transfer."""

		if self.on_sync_complete:
			self.on_sync_complete(source, pairs)


	# ─── Editor -> store (debounced) ───────────────────────────────────────

	def sync_from_editor (self) -> bool:

		"""
		Schedule a store update from the editor's current pairs.

		Returns False when called from inside a transfer.
		"""

		if self.state is SyncState.SYNCING:
			return self._refuse("sync_from_editor")

		self.state = SyncState.PENDING

		try:
			self._debounce.start()
		except RuntimeError:
			self.state = SyncState.IDLE
			raise

		return True

	def flush (self) -> bool:

		"""Run a pending editor transfer immediately.  Returns True if one ran."""

		return self._debounce.flush()

	def _flush_editor (self) -> None:

		"""Copy the editor's pairs into the store."""

		with self._syncing():
			pairs = self.editor.pairs()
			self.store.set_pairs(pairs)
			logger.debug(f"Editor -> store: {len(pairs)} pair(s)")
			self._complete("editor", self.store.pairs())


	# ─── Store -> editor (synchronous) ─────────────────────────────────────

	def sync_to_editor (self) -> bool:

		"""Push the store's axis lists into the editor right now."""

		if self.state is not SyncState.IDLE:
			return self._refuse("sync_to_editor")

		with self._syncing():
			self._push_to_editor()
			self._complete("state", self.store.pairs())

		return True

	def set_pairs (self, pairs: typing.Iterable[Pair]) -> bool:

		"""Replace the store contents and mirror them into the editor."""

		if self.state is not SyncState.IDLE:
			return self._refuse("set_pairs")

		with self._syncing():
			self.store.set_pairs(pairs)
			self._push_to_editor()
			self._complete("state", self.store.pairs())

		return True

	def add_pair (self, note: int, pulse: int) -> bool:

		"""Add one pair and mirror it, bypassing the debounce.  False if refused or already present."""

		if self.state is not SyncState.IDLE:
			return self._refuse("add_pair")

		with self._syncing():
			added = self.store.add(note, pulse)

			if added:
				self._push_to_editor()
				self._complete("state", self.store.pairs())

		return added

	def remove_pair (self, note: int, pulse: int) -> bool:

		"""Remove one pair and mirror it, bypassing the debounce.  False if refused or absent."""

		if self.state is not SyncState.IDLE:
			return self._refuse("remove_pair")

		with self._syncing():
			removed = self.store.remove(note, pulse)

			if removed:
				self._push_to_editor()
				self._complete("state", self.store.pairs())

		return removed

	def clear (self) -> None:

		"""Empty store and editor, discarding any pending editor transfer."""

		self._debounce.cancel()

		with self._syncing():
			self.store.clear()
			self.editor.clear()
			self._complete("clear", [])

	def destroy (self) -> None:

		"""Cancel any pending transfer."""

		self._debounce.cancel()
		self.state = SyncState.IDLE

	def _push_to_editor (self) -> None:

		"""Write the store's axis lists into the editor."""

		self.editor.set_notes(self.store.notes())
		self.editor.set_pulses(self.store.pulses())
