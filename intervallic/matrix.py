"""Text-driven front end: the dual editor, the pair store and the sync manager wired together.

Typing flows editor -> (debounced) sync -> store; programmatic writes flow
store -> editor synchronously.  The :attr:`MatrixSequence.store` and
:attr:`MatrixSequence.sync` can be handed to an
:class:`~intervallic.controller.IntervalSequencer` so drag edits show up in
the text fields as well.
"""

import logging
import typing

import intervallic.config
import intervallic.constants
import intervallic.editor
import intervallic.pair_store
import intervallic.parser
import intervallic.sync

from intervallic.pairs import Pair


logger = logging.getLogger(__name__)


class MatrixSequence:

	"""
	A pair sequence edited through two text fields.

	Example:
		```python
		matrix = MatrixSequence(debounce_ms=0)
		matrix.editor.input_notes("0 4 7")
		matrix.pairs()  # [Pair(0, 0), Pair(4, 1), Pair(7, 2)]
		```
	"""

	def __init__ (
		self,
		note_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_NOTE_RANGE,
		pulse_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_PULSE_RANGE,
		debounce_ms: int = intervallic.constants.DEFAULT_DEBOUNCE_MS,
		notice_ms: typing.Optional[int] = intervallic.constants.DEFAULT_NOTICE_MS,
		on_pairs_change: typing.Optional[typing.Callable[[typing.List[Pair]], typing.Any]] = None,
		on_sync_complete: typing.Optional[intervallic.sync.SyncCompleteCallback] = None,
		**editor_callbacks: typing.Any
	) -> None:

		"""Build the editor, the store and the sync manager that joins them."""

		self.store = intervallic.pair_store.PairStore(note_range, pulse_range, on_change=on_pairs_change)

		self.editor = intervallic.editor.DualEditor(
			note_range = note_range,
			pulse_range = pulse_range,
			on_pairs_change = self._on_editor_pairs,
			notice_ms = notice_ms,
			**editor_callbacks
		)

		self.sync = intervallic.sync.SyncManager(self.editor, self.store, on_sync_complete=on_sync_complete, debounce_ms=debounce_ms)

	@classmethod
	def from_config (cls, config: intervallic.config.SequencerConfig, **kwargs: typing.Any) -> "MatrixSequence":

		"""Build a matrix sequence from a :class:`~intervallic.config.SequencerConfig`."""

		return cls(
			note_range = config.note_range,
			pulse_range = config.pulse_range,
			debounce_ms = config.debounce_ms,
			notice_ms = config.notice_ms,
			**kwargs
		)

	def _on_editor_pairs (self, pairs: typing.List[Pair]) -> None:

		"""Schedule a store update whenever the editor's pairs change."""

		# Refused while the sync manager is writing into the editor itself.
		self.sync.sync_from_editor()


	# ─── Pairs ─────────────────────────────────────────────────────────────

	def pairs (self) -> typing.List[Pair]:

		"""A fresh copy of the stored pairs."""

		return self.store.pairs()

	def notes (self) -> typing.List[int]:

		"""Stored notes in pair order."""

		return self.store.notes()

	def pulses (self) -> typing.List[int]:

		"""Stored pulses in pair order."""

		return self.store.pulses()

	def count (self) -> int:

		"""Number of stored pairs."""

		return self.store.count()

	def has_pair (self, note: int, pulse: int) -> bool:

		"""True if a pair starts at ``(note, pulse)``."""

		return self.store.has(note, pulse)

	def set_pairs (self, pairs: typing.Iterable[Pair]) -> bool:

		"""Replace the pairs and mirror them into the editor.  False if a transfer is pending or running."""

		return self.sync.set_pairs(pairs)

	def add_pair (self, note: int, pulse: int) -> bool:

		"""Switch one cell on.  False if refused or already on."""

		return self.sync.add_pair(note, pulse)

	def remove_pair (self, note: int, pulse: int) -> bool:

		"""Switch one cell off.  False if refused or already off."""

		return self.sync.remove_pair(note, pulse)

	def toggle (self, note: int, pulse: int) -> bool:

		"""Flip one cell, as a click on the grid does.  Returns the new on/off state."""

		if self.store.has(note, pulse):
			self.sync.remove_pair(note, pulse)
		else:
			self.sync.add_pair(note, pulse)

		return self.store.has(note, pulse)

	def clear (self) -> None:

		"""Empty the pairs, the text and the memory."""

		self.sync.clear()


	# ─── Text ──────────────────────────────────────────────────────────────

	def text (self) -> typing.Dict[str, str]:

		"""Current text of both fields, keyed ``notes`` and ``pulses``."""

		return {"notes": self.editor.note_text, "pulses": self.editor.pulse_text}

	def set_text (self, notes: typing.Optional[str] = None, pulses: typing.Optional[str] = None) -> None:

		"""Write whole-field text programmatically; non-numeric tokens are dropped."""

		if notes is not None:
			self.editor.set_notes(self._numbers(notes))

		if pulses is not None:
			self.editor.set_pulses(self._numbers(pulses))

	@staticmethod
	def _numbers (text: str) -> typing.List[int]:

		"""Integer tokens of ``text``, skipping anything else."""

		numbers = []

		for token in intervallic.parser.tokenize(text):
			try:
				numbers.append(int(token))
			except ValueError:
				continue

		return numbers


	# ─── Memory grid ───────────────────────────────────────────────────────

	def resize (self, note_count: int, pulse_count: int) -> bool:

		"""
		Change the active grid size, restoring remembered cells that fit,
		and mirror the result into the editor.

		A pending editor change is applied first so it cannot land on the
		resized store later.  Returns False, changing nothing, when called
		from inside a transfer.
		"""

		if self.sync.state is intervallic.sync.SyncState.SYNCING:
			logger.debug("resize refused while syncing")
			return False

		self.sync.flush()
		self.store.resize(note_count, pulse_count)

		for field, high in ((self.editor.fields[intervallic.parser.AxisKind.SOUND], note_count), (self.editor.fields[intervallic.parser.AxisKind.TIME], pulse_count)):
			field.value_range = (field.value_range[0], high)

		return self.sync.sync_to_editor()

	def get_memory (self, note: int, pulse: int) -> bool:

		"""Whether a cell is on in memory."""

		return self.store.get_memory(note, pulse)

	def set_memory (self, note: int, pulse: int, value: bool) -> None:

		"""Switch a memory cell on or off without touching the live pairs."""

		self.store.set_memory(note, pulse, value)

	def ensure_memory (self, note_count: int, pulse_count: int) -> None:

		"""Pad memory with off cells up to the given bounds."""

		self.store.ensure_memory(note_count, pulse_count)

	def memory_pairs (self) -> typing.List[Pair]:

		"""Every cell on in memory, sorted by note then pulse."""

		return self.store.memory_pairs()

	def destroy (self) -> None:

		"""Cancel pending timers and drop store listeners."""

		self.sync.destroy()
		self.editor.destroy()
		self.store.events.clear()
