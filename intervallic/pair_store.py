"""The canonical pair list - the single source of truth for a sequence.

:class:`PairStore` keeps three views in step:

1. The order-preserving list of :class:`~intervallic.pairs.Pair` objects.
2. A set of ``"note-pulse"`` keys for O(1) membership tests.
3. The *memory grid*, a sparse ``note -> pulse -> bool`` map of toggled
   cells that outlives the active axis bounds, so cells switched on beyond
   a shrunk grid reappear when the grid grows again.

Every mutation replaces the list wholesale (copy-on-write) and fires one
``pairs_changed`` event after it completes.
"""

import logging
import typing

import intervallic.constants
import intervallic.event_emitter

from intervallic.pairs import Pair


logger = logging.getLogger(__name__)

MemoryGrid = typing.Dict[int, typing.Dict[int, bool]]


class PairStore:

	"""
	Order-preserving pair list plus key set and memory grid.

	Parameters:
		note_range: Inclusive active bounds of the sound axis.
		pulse_range: Inclusive active bounds of the time axis.
		on_change: Optional listener registered for ``pairs_changed``.
	"""

	def __init__ (
		self,
		note_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_NOTE_RANGE,
		pulse_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_PULSE_RANGE,
		on_change: typing.Optional[typing.Callable[[typing.List[Pair]], typing.Any]] = None
	) -> None:

		"""Start with no pairs and an empty memory grid."""

		self.note_range = tuple(note_range)
		self.pulse_range = tuple(pulse_range)

		self._pairs: typing.Tuple[Pair, ...] = ()
		self._keys: typing.Set[str] = set()
		self._memory: MemoryGrid = {}

		self.events = intervallic.event_emitter.EventEmitter()

		if on_change is not None:
			self.on_change(on_change)

	def on_change (self, callback: typing.Callable[[typing.List[Pair]], typing.Any]) -> typing.Callable[[], None]:

		"""Subscribe to list replacements.  Returns an unsubscribe function."""

		return self.events.on(intervallic.event_emitter.PAIRS_CHANGED, callback)

	def _commit (self, pairs: typing.Iterable[Pair]) -> None:

		"""Replace the list, rebuild the key set and notify listeners."""

		self._pairs = tuple(pairs)
		self._keys = {pair.key for pair in self._pairs}

		logger.debug(f"Store now holds {len(self._pairs)} pair(s)")

		self.events.emit(intervallic.event_emitter.PAIRS_CHANGED, self.pairs())


	# ─── Queries ───────────────────────────────────────────────────────────

	def pairs (self) -> typing.List[Pair]:

		"""A fresh list of the stored pairs (order preserved)."""

		return list(self._pairs)

	def notes (self) -> typing.List[int]:

		"""Stored notes in pair order."""

		return [pair.note for pair in self._pairs]

	def pulses (self) -> typing.List[int]:

		"""Stored pulses in pair order."""

		return [pair.pulse for pair in self._pairs]

	def has (self, note: int, pulse: int) -> bool:

		"""True if a pair starts at ``(note, pulse)``."""

		return f"{note}-{pulse}" in self._keys

	def count (self) -> int:

		"""Number of stored pairs."""

		return len(self._pairs)

	def __len__ (self) -> int:

		"""Number of stored pairs."""

		return len(self._pairs)

	def __iter__ (self) -> typing.Iterator[Pair]:

		"""Iterate over the stored pairs in order."""

		return iter(self._pairs)


	# ─── Mutations ─────────────────────────────────────────────────────────

	def add (self, note: int, pulse: int) -> bool:

		"""
		Append a single-pulse pair.  Returns False if the cell is already taken.
		"""

		if self.has(note, pulse):
			return False

		self.set_memory(note, pulse, True)
		self._commit(self._pairs + (Pair(note=note, pulse=pulse),))

		return True

	def remove (self, note: int, pulse: int) -> bool:

		"""
		Remove every pair starting at ``(note, pulse)``.  Returns False if none did.
		"""

		if not self.has(note, pulse):
			return False

		self.set_memory(note, pulse, False)
		self._commit(p for p in self._pairs if not (p.note == note and p.pulse == pulse))

		return True

	def set_pairs (self, pairs: typing.Iterable[Pair]) -> None:

		"""
		Atomically replace the whole list.

		Memory cells inside the active bounds are rewritten to match the new
		list (rests do not switch cells on); cells outside them are left alone.
		"""

		new_pairs = tuple(pairs)

		for note, row in self._memory.items():
			if self._in_bounds(note, None):
				for pulse in row:
					if self._in_bounds(None, pulse):
						row[pulse] = False

		for pair in new_pairs:
			if not pair.is_rest:
				self.set_memory(pair.note, pair.pulse, True)

		self._commit(new_pairs)

	def clear (self) -> None:

		"""Empty the list and forget the memory grid."""

		self._memory = {}
		self._commit(())


	# ─── Memory grid ───────────────────────────────────────────────────────

	def get_memory (self, note: int, pulse: int) -> bool:

		"""Whether a cell is on in memory."""

		return self._memory.get(note, {}).get(pulse, False)

	def set_memory (self, note: int, pulse: int, value: bool) -> None:

		"""Switch a memory cell on or off."""

		self._memory.setdefault(note, {})[pulse] = value

	def ensure_memory (self, note_count: int, pulse_count: int) -> None:

		"""
		Pad the grid with ``False`` up to ``note_count`` x ``pulse_count``
		(both inclusive), never touching cells already present.
		"""

		for note in range(note_count + 1):
			row = self._memory.setdefault(note, {})
			for pulse in range(pulse_count + 1):
				row.setdefault(pulse, False)

	def memory_pairs (self) -> typing.List[Pair]:

		"""Every cell currently marked on in memory, sorted by note then pulse."""

		return [
			Pair(note=note, pulse=pulse)
			for note in sorted(self._memory)
			for pulse in sorted(self._memory[note])
			if self._memory[note][pulse]
		]

	def resize (self, note_count: int, pulse_count: int) -> None:

		"""
		Change the active axis bounds and rebuild the live list from memory.

		Live pairs that still fit keep their order and fields; cells that
		were on in memory and now fit are appended in pulse order.  Pairs
		that no longer fit stay on in memory.
		"""

		self.ensure_memory(note_count, pulse_count)

		self.note_range = (self.note_range[0], note_count)
		self.pulse_range = (self.pulse_range[0], pulse_count)

		kept = [p for p in self._pairs if self._in_bounds(p.note, p.pulse)]
		kept_keys = {p.key for p in kept}

		restored = sorted(
			(p for p in self.memory_pairs() if p.key not in kept_keys and self._in_bounds(p.note, p.pulse)),
			key = lambda p: (p.pulse, p.note)
		)

		logger.debug(f"Resized to notes<={note_count}, pulses<={pulse_count}: kept {len(kept)}, restored {len(restored)}")

		self._commit(kept + restored)

	def _in_bounds (self, note: typing.Optional[int], pulse: typing.Optional[int]) -> bool:

		"""True if the given coordinates lie inside the active ranges; None skips an axis."""

		if note is not None and not self.note_range[0] <= note <= self.note_range[1]:
			return False

		if pulse is not None and not self.pulse_range[0] <= pulse <= self.pulse_range[1]:
			return False

		return True
