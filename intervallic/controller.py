"""The interval sequencer facade.

:class:`IntervalSequencer` composes the pair store, the interval converter,
the gap filler and the drag handler behind one API, and hands every new
interval chain to a renderer collaborator.  The renderer only observes -
it never mutates state.

Data flow for every change, whatever its origin (``set_pairs``, a drag, an
attached text editor)::

	pairs -> PairStore.set_pairs -> pairs_changed -> pairs_to_intervals
	      -> renderer.render(intervals) -> on_pairs_change / on_intervals_change
"""

import logging
import typing

import intervallic.config
import intervallic.constants
import intervallic.converter
import intervallic.drag
import intervallic.event_emitter
import intervallic.gap_filler
import intervallic.pair_store
import intervallic.sync

from intervallic.pairs import BasePair, Gap, Interval, Pair


logger = logging.getLogger(__name__)


class Renderer (typing.Protocol):

	"""What the sequencer needs from whatever draws the interval bars."""

	def render (self, intervals: typing.List[Interval]) -> None:

		"""Draw the interval chain; called after every change."""

		...

	def highlight_bar (self, index: int, duration_ms: int) -> None:

		"""Emphasise one bar for ``duration_ms`` milliseconds."""

		...

	def destroy (self) -> None:

		"""Release whatever the renderer drew."""

		...


class IntervalSequencer:

	"""
	Top-level API over pairs, intervals, gaps and drag editing.

	Parameters:
		host: Grid component supplying cell lookups and container bounds.
		renderer: Receives the interval chain after every change.
		total_spaces: Cells along the time axis.
		base_pair: Anchor of the first interval.
		auto_fill_gaps: Fill gaps with rests on ``set_pairs`` and after drags.
		polyphony: Allow overlapping spans.
		note_range: Sound axis bounds (used by ``wrap_around``).
		pulse_range: Time axis bounds of the store built when none is given.
		max_pulse: Exclusive end of the time axis checked by :meth:`validate`.
		wrap_around: Fold notes built by ``set_intervals`` into ``note_range``.
		highlight_ms: Default duration for :meth:`highlight_interval`.
		store: Share an existing store (e.g. a ``MatrixSequence.store``).
		sync: Route writes through a sync manager so the text editor follows.
		on_pairs_change: Subscribed to pair changes.
		on_intervals_change: Subscribed to interval changes, ``(intervals, pairs)``.
		on_note_preview: Fired with ``(note_index, temporal_interval)`` per created pair.
		on_drag_start: Passed through to the drag handler.
		on_drag_end: Passed through to the drag handler.

	Example:
		```python
		sequencer = IntervalSequencer(grid, bars, base_pair=BasePair(0, 0))
		sequencer.set_pairs([Pair(7, 0), Pair(3, 4)])
		sequencer.intervals()
		# [Interval(7, 1), Interval(0, 3, is_rest=True), Interval(-4, 1)]
		```
	"""

	def __init__ (
		self,
		host: intervallic.drag.GridHost,
		renderer: Renderer,
		total_spaces: int = intervallic.constants.DEFAULT_TOTAL_SPACES,
		base_pair: BasePair = BasePair(),
		auto_fill_gaps: bool = True,
		polyphony: bool = False,
		note_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_NOTE_RANGE,
		pulse_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_PULSE_RANGE,
		max_pulse: int = intervallic.constants.DEFAULT_MAX_PULSE,
		wrap_around: bool = False,
		highlight_ms: int = intervallic.constants.DEFAULT_HIGHLIGHT_MS,
		store: typing.Optional[intervallic.pair_store.PairStore] = None,
		sync: typing.Optional[intervallic.sync.SyncManager] = None,
		on_pairs_change: typing.Optional[typing.Callable[[typing.List[Pair]], typing.Any]] = None,
		on_intervals_change: typing.Optional[typing.Callable[[typing.List[Interval], typing.List[Pair]], typing.Any]] = None,
		on_note_preview: typing.Optional[typing.Callable[[int, int], typing.Any]] = None,
		on_drag_start: typing.Optional[typing.Callable[[intervallic.drag.Dragging], typing.Any]] = None,
		on_drag_end: typing.Optional[typing.Callable[[typing.List[Pair], intervallic.drag.DragResult], typing.Any]] = None
	) -> None:

		"""Wire the store, drag handler and listeners, and compute the initial intervals."""

		if host is None:
			raise ValueError("IntervalSequencer needs a grid host")

		if renderer is None:
			raise ValueError("IntervalSequencer needs a renderer")

		if sync is not None and store is not None and sync.store is not store:
			raise ValueError("The sync manager must wrap the same store")

		self.renderer = renderer
		self.base_pair = base_pair
		self.auto_fill_gaps = auto_fill_gaps
		self.note_range = tuple(note_range)
		self.pulse_range = tuple(pulse_range)
		self.max_pulse = max_pulse
		self.wrap_around = wrap_around
		self.highlight_ms = highlight_ms

		self.sync = sync

		if store is None:
			store = sync.store if sync is not None else intervallic.pair_store.PairStore(note_range=note_range, pulse_range=pulse_range)

		self.store = store

		self._polyphony = polyphony
		self._intervals: typing.List[Interval] = []
		self._destroyed = False

		self.events = intervallic.event_emitter.EventEmitter()

		if on_pairs_change is not None:
			self.on_pairs_change(on_pairs_change)

		if on_intervals_change is not None:
			self.on_intervals_change(on_intervals_change)

		self.drag = intervallic.drag.DragHandler(
			host = host,
			total_spaces = total_spaces,
			get_pairs = self.store.pairs,
			set_pairs = self._write,
			get_polyphony_enabled = lambda: self._polyphony,
			fill_gaps = self._fill if auto_fill_gaps else None,
			on_drag_start = on_drag_start,
			on_drag_end = on_drag_end,
			on_note_preview = on_note_preview
		)

		self._unsubscribe_store = self.store.on_change(self._handle_pairs_changed)
		self._intervals = intervallic.converter.pairs_to_intervals(self.store.pairs(), self.base_pair)

	@classmethod
	def from_config (
		cls,
		config: intervallic.config.SequencerConfig,
		host: intervallic.drag.GridHost,
		renderer: Renderer,
		**kwargs: typing.Any
	) -> "IntervalSequencer":

		"""Build a sequencer from a :class:`~intervallic.config.SequencerConfig`."""

		return cls(
			host,
			renderer,
			total_spaces = config.total_spaces,
			base_pair = config.base_pair,
			auto_fill_gaps = config.auto_fill_gaps,
			polyphony = config.polyphony,
			note_range = config.note_range,
			pulse_range = config.pulse_range,
			max_pulse = config.max_pulse,
			wrap_around = config.wrap_around,
			highlight_ms = config.highlight_ms,
			**kwargs
		)


	# ─── Observation ───────────────────────────────────────────────────────

	def on_pairs_change (self, callback: typing.Callable[[typing.List[Pair]], typing.Any]) -> typing.Callable[[], None]:

		"""Subscribe to pair changes.  Returns an unsubscribe function."""

		return self.events.on(intervallic.event_emitter.PAIRS_CHANGED, callback)

	def on_intervals_change (self, callback: typing.Callable[[typing.List[Interval], typing.List[Pair]], typing.Any]) -> typing.Callable[[], None]:

		"""Subscribe to interval changes, called with ``(intervals, pairs)``.  Returns an unsubscribe function."""

		return self.events.on(intervallic.event_emitter.INTERVALS_CHANGED, callback)

	def pairs (self) -> typing.List[Pair]:

		"""A fresh copy of the current pairs."""

		return self.store.pairs()

	def intervals (self) -> typing.List[Interval]:

		"""A fresh copy of the current interval chain."""

		return list(self._intervals)

	def _handle_pairs_changed (self, pairs: typing.List[Pair]) -> None:

		"""Recompute the intervals, render them and notify listeners."""

		self._intervals = intervallic.converter.pairs_to_intervals(pairs, self.base_pair)
		self.renderer.render(self.intervals())

		self.events.emit(intervallic.event_emitter.PAIRS_CHANGED, list(pairs))
		self.events.emit(intervallic.event_emitter.INTERVALS_CHANGED, self.intervals(), list(pairs))


	# ─── Writes ────────────────────────────────────────────────────────────

	def _fill (self, pairs: typing.List[Pair]) -> typing.List[Pair]:

		"""Fill gaps relative to the base pair."""

		return intervallic.gap_filler.fill_gaps_with_silences(pairs, self.base_pair)

	def _write (self, pairs: typing.List[Pair]) -> bool:

		"""Commit through the sync manager when attached, otherwise straight to the store."""

		if self._destroyed:
			logger.warning("Write ignored: sequencer has been destroyed")
			return False

		if self.sync is not None:
			return self.sync.set_pairs(pairs)

		self.store.set_pairs(pairs)

		return True

	def set_pairs (self, pairs: typing.Iterable[Pair]) -> bool:

		"""
		Replace the sequence (gap-filled when ``auto_fill_gaps`` is on).

		Returns False if an attached sync manager is mid-transfer; the
		previous sequence is kept and the caller may retry.
		"""

		new_pairs = list(pairs)

		if self.auto_fill_gaps:
			new_pairs = self._fill(new_pairs)

		return self._write(new_pairs)

	def set_intervals (self, intervals: typing.Iterable[Interval]) -> bool:

		"""Replace the sequence with the pairs an interval chain describes."""

		pairs = intervallic.converter.build_pairs_from_intervals(
			self.base_pair,
			intervals,
			wrap_around = self.wrap_around,
			note_range = self.note_range
		)

		return self._write(pairs)

	def add_pair (self, pair: Pair) -> bool:

		"""Add one pair, first removing overlapping ones unless polyphony is on."""

		current = self.store.pairs()

		if not self._polyphony:
			current = [p for p in current if not p.overlaps(pair.pulse, pair.temporal_interval)]

		return self.set_pairs(current + [pair])

	def remove_pair (self, index: int) -> bool:

		"""Remove the pair at a list index.  False if the index is out of range."""

		current = self.store.pairs()

		if not 0 <= index < len(current):
			return False

		return self.set_pairs(current[:index] + current[index + 1:])

	def remove_pair_at (self, note: int, pulse: int) -> bool:

		"""Remove every pair starting at ``(note, pulse)``.  False if none did."""

		current = self.store.pairs()
		kept = [p for p in current if not (p.note == note and p.pulse == pulse)]

		if len(kept) == len(current):
			return False

		return self.set_pairs(kept)

	def clear (self) -> bool:

		"""Remove every pair."""

		return self.set_pairs([])


	# ─── Gaps ──────────────────────────────────────────────────────────────

	def get_gaps (self) -> typing.List[Gap]:

		"""The gaps in the current sequence, measured from the base pulse."""

		return intervallic.gap_filler.detect_gaps(self.store.pairs(), self.base_pair)

	def has_gaps (self) -> bool:

		"""True if the current sequence has at least one gap."""

		return intervallic.gap_filler.has_gaps(self.store.pairs(), self.base_pair)

	def fill_current_gaps (self) -> bool:

		"""Fill the gaps of the current sequence regardless of ``auto_fill_gaps``."""

		return self._write(self._fill(self.store.pairs()))


	# ─── Validation ────────────────────────────────────────────────────────

	def validate (self) -> intervallic.converter.SequenceValidation:

		"""
		Check the current pairs against ``note_range`` and ``max_pulse``.

		Pulse continuity is part of the check, so a sequence with gaps is
		reported as broken unless the gaps are filled.
		"""

		return intervallic.converter.validate_pair_sequence(self.store.pairs(), self.note_range, self.max_pulse)

	def validate_intervals (self, intervals: typing.Sequence[Interval]) -> intervallic.converter.SequenceValidation:

		"""Check an interval chain before handing it to :meth:`set_intervals`."""

		return intervallic.converter.validate_interval_sequence(intervals, self.base_pair, self.note_range, self.max_pulse)


	# ─── Modes and drag passthroughs ───────────────────────────────────────

	@property
	def polyphony_enabled (self) -> bool:

		"""Whether overlapping spans may coexist."""

		return self._polyphony

	def set_polyphony (self, enabled: bool) -> None:

		"""Turn polyphony on or off for later edits."""

		self._polyphony = bool(enabled)

	def set_drag_enabled (self, enabled: bool) -> None:

		"""Enable or disable drag editing; disabling cancels a drag in progress."""

		self.drag.set_enabled(enabled)

	@property
	def is_dragging (self) -> bool:

		"""True while a drag is in progress."""

		return self.drag.is_active

	def start_drag (self, note_index: int, space_index: int) -> bool:

		"""Begin a drag at a grid cell."""

		return self.drag.start_drag(note_index, space_index)

	def pointer_move (self, client_x: float) -> bool:

		"""Follow the pointer during a drag."""

		return self.drag.pointer_move(client_x)

	def pointer_up (self) -> typing.Optional[typing.List[Pair]]:

		"""Finish the drag and commit its result."""

		return self.drag.pointer_up()

	def cancel_drag (self) -> bool:

		"""Abandon the current drag without committing."""

		return self.drag.cancel()


	# ─── Rendering and lifecycle ───────────────────────────────────────────

	def highlight_interval (self, index: int, duration_ms: typing.Optional[int] = None) -> None:

		"""Ask the renderer to flash one interval bar; it owns the timing."""

		self.renderer.highlight_bar(index, self.highlight_ms if duration_ms is None else duration_ms)

	def refresh (self) -> None:

		"""Re-render the current intervals, e.g. after a layout change."""

		self.renderer.render(self.intervals())

	def destroy (self) -> None:

		"""Release listeners, cancel any drag and tear down the renderer."""

		if self._destroyed:
			return

		self._destroyed = True
		self.drag.destroy()
		self._unsubscribe_store()
		self.events.clear()
		self.renderer.destroy()

		logger.info("Interval sequencer destroyed")
