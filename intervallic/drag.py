"""Pointer drags over the note/pulse grid as a small state machine.

The handler is either :class:`Idle` or :class:`Dragging`.  A pointer-down
on an empty cell starts a ``CREATE`` drag; on a cell where a pair starts it
starts an ``EDIT`` drag holding that very pair object.  Moving the pointer
stretches a preview span along the time axis, and releasing it commits a
new pair list:

- ``CREATE`` adds ``Pair(note, min(start, end), |end - start| + 1)``.  With
  polyphony off every pair overlapping the new span is removed first.
- ``EDIT`` replaces the held pair (matched by identity, so two pairs with
  equal fields are told apart) with a copy carrying the new span.

The handler only knows cell indices.  Pixels stay with the host, which
supplies the container bounds used to map a pointer x coordinate to a cell.
"""

import dataclasses
import enum
import logging
import typing

from intervallic.pairs import Pair


logger = logging.getLogger(__name__)


class DragMode (enum.Enum):

	CREATE = "create"
	EDIT = "edit"


@dataclasses.dataclass(frozen=True)
class Idle:

	"""No drag in progress."""


@dataclasses.dataclass(frozen=True)
class Dragging:

	"""
	A drag in progress on one note row.

	Attributes:
		mode: Whether release creates a pair or edits ``original_pair``.
		note_index: The row being dragged.
		start_space: Cell where the pointer went down.
		current_space: Cell under the pointer now.
		original_pair: The stored pair being edited (``EDIT`` only).
	"""

	mode: DragMode
	note_index: int
	start_space: int
	current_space: int
	original_pair: typing.Optional[Pair] = None

	def __post_init__ (self) -> None:

		"""Reject edit drags without a pair and create drags with one."""

		if self.mode is DragMode.EDIT and self.original_pair is None:
			raise ValueError("An edit drag needs the pair being edited")

		if self.mode is DragMode.CREATE and self.original_pair is not None:
			raise ValueError("A create drag cannot hold an existing pair")

	@property
	def span (self) -> typing.Tuple[int, int]:

		"""Inclusive ``(first, last)`` cells covered by the drag."""

		return min(self.start_space, self.current_space), max(self.start_space, self.current_space)

	@property
	def temporal_interval (self) -> int:

		"""Length in cells of the span covered so far."""

		return abs(self.current_space - self.start_space) + 1


DragState = typing.Union[Idle, Dragging]

IDLE = Idle()


@dataclasses.dataclass(frozen=True)
class Bounds:

	"""Screen rectangle of the grid container, in the host's units."""

	left: float
	top: float
	width: float
	height: float


class GridHost (typing.Protocol):

	"""What the drag handler needs from the component that draws the grid."""

	def get_cell_element (self, note: int, pulse: int) -> typing.Any:

		"""Return the host's handle for a cell, or None when it is off the grid."""

		...

	def get_matrix_container_bounds (self) -> typing.Optional[Bounds]:

		"""Return the grid container rectangle, or None when it is not laid out."""

		...


@dataclasses.dataclass(frozen=True)
class DragResult:

	"""Summary passed to ``on_drag_end`` alongside the committed pairs."""

	mode: DragMode
	note_index: int
	pulse: int
	temporal_interval: int


def start_space_of (pair: Pair) -> int:

	"""The cell where a pair starts."""

	return pair.pulse


def end_space_of (pair: Pair) -> int:

	"""The last cell a pair occupies."""

	return pair.pulse + pair.temporal_interval - 1


class DragHandler:

	"""
	Translate pointer input into create/edit operations on a pair list.

	Parameters:
		host: Supplies cell lookups and container bounds.
		total_spaces: Number of cells along the time axis.
		get_pairs: Returns the current pair list.
		set_pairs: Commits a new pair list.  Returning ``False`` means the
			write was refused and ``on_drag_end`` is not called.
		get_polyphony_enabled: Whether overlapping spans may coexist.
		fill_gaps: Optional normaliser applied to the list before committing.
		on_drag_start: Called with the new :class:`Dragging` state.
		on_drag_move: Called with the updated :class:`Dragging` state.
		on_drag_end: Called with ``(pairs, DragResult)`` after a commit.
		on_note_preview: Called with ``(note_index, temporal_interval)`` for
			newly created pairs only.

	Example:
		```python
		handler = DragHandler(host, 8, store.pairs, store.set_pairs)
		handler.start_drag(note_index=5, space_index=2)
		handler.pointer_move(client_x=260)
		handler.pointer_up()
		```
	"""

	def __init__ (
		self,
		host: GridHost,
		total_spaces: int,
		get_pairs: typing.Callable[[], typing.List[Pair]],
		set_pairs: typing.Callable[[typing.List[Pair]], typing.Any],
		get_polyphony_enabled: typing.Callable[[], bool] = lambda: False,
		fill_gaps: typing.Optional[typing.Callable[[typing.List[Pair]], typing.List[Pair]]] = None,
		on_drag_start: typing.Optional[typing.Callable[[Dragging], typing.Any]] = None,
		on_drag_move: typing.Optional[typing.Callable[[Dragging], typing.Any]] = None,
		on_drag_end: typing.Optional[typing.Callable[[typing.List[Pair], DragResult], typing.Any]] = None,
		on_note_preview: typing.Optional[typing.Callable[[int, int], typing.Any]] = None
	) -> None:

		"""Start idle with drag editing enabled."""

		if host is None:
			raise ValueError("DragHandler needs a grid host")

		if total_spaces < 1:
			raise ValueError(f"total_spaces must be positive, got {total_spaces}")

		self.host = host
		self.total_spaces = total_spaces
		self._get_pairs = get_pairs
		self._set_pairs = set_pairs
		self._get_polyphony_enabled = get_polyphony_enabled
		self._fill_gaps = fill_gaps

		self.on_drag_start = on_drag_start
		self.on_drag_move = on_drag_move
		self.on_drag_end = on_drag_end
		self.on_note_preview = on_note_preview

		self.enabled = True
		self._state: DragState = IDLE
		self.preview_cells: typing.List[typing.Any] = []

	@property
	def state (self) -> DragState:

		"""The current :class:`Idle` or :class:`Dragging` state."""

		return self._state

	@property
	def is_active (self) -> bool:

		"""True while a drag is in progress."""

		return isinstance(self._state, Dragging)

	@property
	def preview_span (self) -> typing.Optional[typing.Tuple[int, int]]:

		"""Inclusive cells covered by the drag in progress, or None when idle."""

		if isinstance(self._state, Dragging):
			return self._state.span

		return None


	def space_index_from_pointer (self, client_x: float) -> typing.Optional[int]:

		"""
		The cell under a pointer x coordinate, clamped to ``[0, total_spaces - 1]``.

		Returns None when the host cannot report its bounds.
		"""

		bounds = self.host.get_matrix_container_bounds()

		if bounds is None or bounds.width <= 0:
			return None

		cell_width = bounds.width / self.total_spaces
		space = int((client_x - bounds.left) // cell_width)

		return max(0, min(self.total_spaces - 1, space))


	# ─── Transitions ───────────────────────────────────────────────────────

	def start_drag (self, note_index: int, space_index: int) -> bool:

		"""
		Idle -> Dragging on pointer-down.  Returns False if disabled or the
		cell is off the grid.  A drag already in progress is cancelled.
		"""

		if not self.enabled:
			return False

		if not 0 <= space_index < self.total_spaces or note_index < 0:
			logger.debug(f"Ignoring pointer-down outside the grid at ({note_index}, {space_index})")
			return False

		if self.is_active:
			self.cancel()

		existing = next((p for p in self._get_pairs() if p.note == note_index and p.pulse == space_index), None)

		self._state = Dragging(
			mode = DragMode.EDIT if existing is not None else DragMode.CREATE,
			note_index = note_index,
			start_space = space_index,
			current_space = space_index,
			original_pair = existing
		)

		logger.debug(f"Drag started: {self._state.mode.value} at note {note_index}, space {space_index}")

		self._update_preview()

		if self.on_drag_start:
			self.on_drag_start(self._state)

		return True

	def pointer_move (self, client_x: float) -> bool:

		"""
		Dragging -> Dragging.  Returns True if the hovered cell changed.
		"""

		if not self.enabled or not isinstance(self._state, Dragging):
			return False

		space = self.space_index_from_pointer(client_x)

		if space is None or space == self._state.current_space:
			return False

		self._state = dataclasses.replace(self._state, current_space=space)
		self._update_preview()

		if self.on_drag_move:
			self.on_drag_move(self._state)

		return True

	def move_to_space (self, space_index: int) -> bool:

		"""Like :meth:`pointer_move` but with a cell index instead of a coordinate."""

		if not self.enabled or not isinstance(self._state, Dragging):
			return False

		space = max(0, min(self.total_spaces - 1, space_index))

		if space == self._state.current_space:
			return False

		self._state = dataclasses.replace(self._state, current_space=space)
		self._update_preview()

		if self.on_drag_move:
			self.on_drag_move(self._state)

		return True

	def pointer_up (self) -> typing.Optional[typing.List[Pair]]:

		"""
		Dragging -> Idle, committing the result.

		Returns the committed pairs, or None when there was nothing to commit
		or the write was refused.
		"""

		if not self.enabled or not isinstance(self._state, Dragging):
			return None

		drag = self._state
		first, _ = drag.span
		length = drag.temporal_interval
		pairs = self._get_pairs()

		if drag.mode is DragMode.CREATE:
			new_pairs = self._create(pairs, Pair(note=drag.note_index, pulse=first, temporal_interval=length))
		else:
			new_pairs = [p.with_span(first, length) if p is drag.original_pair else p for p in pairs]

		if self._fill_gaps is not None:
			new_pairs = self._fill_gaps(new_pairs)

		self._reset()

		if drag.mode is DragMode.CREATE and self.on_note_preview:
			self.on_note_preview(drag.note_index, length)

		if self._set_pairs(new_pairs) is False:
			logger.warning("Drag result was refused by the pair store")
			return None

		logger.debug(f"Drag committed: {drag.mode.value} note {drag.note_index} at {first} for {length}")

		if self.on_drag_end:
			self.on_drag_end(new_pairs, DragResult(drag.mode, drag.note_index, first, length))

		return new_pairs

	def _create (self, pairs: typing.List[Pair], new_pair: Pair) -> typing.List[Pair]:

		"""Append a new pair, removing overlapping ones unless polyphony is on."""

		if self._get_polyphony_enabled():
			return pairs + [new_pair]

		kept = [p for p in pairs if not p.overlaps(new_pair.pulse, new_pair.temporal_interval)]

		return kept + [new_pair]


	# ─── Lifecycle ─────────────────────────────────────────────────────────

	def cancel (self) -> bool:

		"""Drop the current drag without committing.  Returns True if one was active."""

		if not self.is_active:
			return False

		logger.debug("Drag cancelled")
		self._reset()

		return True

	def set_enabled (self, enabled: bool) -> None:

		"""Enable or disable the handler.  Disabling mid-drag cancels it."""

		self.enabled = bool(enabled)

		if not self.enabled:
			self.cancel()

	def destroy (self) -> None:

		"""Drop any drag in progress."""

		self._reset()

	def _reset (self) -> None:

		"""Return to idle and clear the preview."""

		self._state = IDLE
		self.preview_cells = []

	def _update_preview (self) -> None:

		"""Recompute the preview cells for the current span."""

		if not isinstance(self._state, Dragging):
			self.preview_cells = []
			return

		first, last = self._state.span
		cells = (self.host.get_cell_element(self._state.note_index, space) for space in range(first, last + 1))

		self.preview_cells = [cell for cell in cells if cell is not None]
