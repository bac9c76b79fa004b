import typing

import pytest

import intervallic.drag
import intervallic.gap_filler

from intervallic.drag import DragHandler, DragMode, DragResult, Dragging, Idle
from intervallic.pairs import Pair


class PairBox:

	"""A plain list standing in for the pair store."""

	def __init__ (self, pairs: typing.Optional[typing.List[Pair]] = None, accept: bool = True) -> None:

		self.pairs = list(pairs or [])
		self.accept = accept
		self.writes: typing.List[typing.List[Pair]] = []

	def get (self) -> typing.List[Pair]:
		return list(self.pairs)

	def set (self, pairs: typing.List[Pair]) -> bool:

		if not self.accept:
			return False

		self.writes.append(pairs)
		self.pairs = list(pairs)

		return True


def make_handler (grid_host, box: PairBox, polyphony: bool = False, **kwargs) -> DragHandler:

	return DragHandler(
		host = grid_host,
		total_spaces = 8,
		get_pairs = box.get,
		set_pairs = box.set,
		get_polyphony_enabled = lambda: polyphony,
		**kwargs
	)


def test_rejects_bad_construction (grid_host) -> None:

	"""A host and at least one space are required."""

	with pytest.raises(ValueError):
		DragHandler(None, 8, list, lambda pairs: True)

	with pytest.raises(ValueError):
		DragHandler(grid_host, 0, list, lambda pairs: True)


def test_drag_state_shape () -> None:

	"""Edit drags hold a pair, create drags never do."""

	with pytest.raises(ValueError):
		Dragging(DragMode.EDIT, 0, 0, 0)

	with pytest.raises(ValueError):
		Dragging(DragMode.CREATE, 0, 0, 0, original_pair=Pair(0, 0))

	drag = Dragging(DragMode.CREATE, 2, 5, 1)

	assert drag.span == (1, 5)
	assert drag.temporal_interval == 5


def test_create_removes_overlaps_without_polyphony (grid_host) -> None:

	"""A new pair knocks out whatever it overlaps."""

	box = PairBox([Pair(3, 1, 3)])
	handler = make_handler(grid_host, box)

	assert handler.start_drag(5, 2) is True
	assert handler.state.mode is DragMode.CREATE

	assert handler.pointer_up() == [Pair(5, 2)]
	assert isinstance(handler.state, Idle)


def test_create_keeps_overlaps_with_polyphony (grid_host) -> None:

	"""With polyphony on, overlapping pairs coexist."""

	box = PairBox([Pair(3, 1, 3)])
	handler = make_handler(grid_host, box, polyphony=True)

	handler.start_drag(5, 2)

	assert handler.pointer_up() == [Pair(3, 1, 3), Pair(5, 2)]


def test_pointer_drag_sets_span (grid_host) -> None:

	"""Dragging right stretches the new pair; callbacks see the result."""

	ends = []
	previews = []
	box = PairBox()
	handler = make_handler(
		grid_host,
		box,
		on_drag_end = lambda pairs, result: ends.append(result),
		on_note_preview = lambda note, length: previews.append((note, length))
	)

	handler.start_drag(4, 1)

	assert handler.pointer_move(grid_host.x_for_space(3)) is True
	assert handler.pointer_move(grid_host.x_for_space(3)) is False
	assert handler.preview_span == (1, 3)

	handler.pointer_up()

	assert box.pairs == [Pair(4, 1, 3)]
	assert ends == [DragResult(DragMode.CREATE, 4, 1, 3)]
	assert previews == [(4, 3)]


def test_drag_left_starts_at_lower_cell (grid_host) -> None:

	"""Dragging backwards anchors the pair at the leftmost cell."""

	box = PairBox()
	handler = make_handler(grid_host, box)

	handler.start_drag(0, 5)
	handler.move_to_space(2)
	handler.pointer_up()

	assert box.pairs == [Pair(0, 2, 4)]


def test_preview_cells_follow_span (grid_host) -> None:

	"""Preview cells cover the row between start and pointer."""

	handler = make_handler(grid_host, PairBox())

	handler.start_drag(1, 2)
	handler.move_to_space(4)

	assert handler.preview_cells == [(1, 2), (1, 3), (1, 4)]

	handler.cancel()

	assert handler.preview_cells == []


def test_edit_replaces_pair_by_identity (grid_host) -> None:

	"""Editing touches only the held object, even if another pair is equal."""

	first = Pair(2, 0)
	second = Pair(2, 0)
	previews = []
	box = PairBox([first, second])
	handler = make_handler(grid_host, box, polyphony=True, on_note_preview=lambda note, length: previews.append(note))

	handler.start_drag(2, 0)

	assert handler.state.mode is DragMode.EDIT
	assert handler.state.original_pair is first

	handler.move_to_space(2)

	assert handler.pointer_up() == [Pair(2, 0, 3), Pair(2, 0)]
	assert previews == []


def test_edit_resets_span_to_drag (grid_host) -> None:

	"""A click on an existing long pair shortens it to one cell."""

	box = PairBox([Pair(6, 2, 3)])
	handler = make_handler(grid_host, box)

	handler.start_drag(6, 2)
	handler.pointer_up()

	assert box.pairs == [Pair(6, 2, 1)]


def test_pointer_is_clamped (grid_host) -> None:

	"""Pointer positions beyond the grid snap to the edge cells."""

	handler = make_handler(grid_host, PairBox())

	assert handler.space_index_from_pointer(10_000) == 7
	assert handler.space_index_from_pointer(-50) == 0
	assert handler.space_index_from_pointer(grid_host.x_for_space(5)) == 5

	grid_host.bounds = None

	assert handler.space_index_from_pointer(100) is None


def test_start_outside_grid_or_disabled (grid_host) -> None:

	"""Pointer-downs off the grid or while disabled are ignored."""

	handler = make_handler(grid_host, PairBox())

	assert handler.start_drag(0, 8) is False
	assert handler.start_drag(-1, 0) is False

	handler.set_enabled(False)

	assert handler.start_drag(0, 0) is False


def test_disable_cancels_active_drag (grid_host) -> None:

	"""Disabling mid-drag drops the drag without committing."""

	box = PairBox()
	handler = make_handler(grid_host, box)

	handler.start_drag(0, 0)
	handler.set_enabled(False)

	assert handler.is_active is False

	handler.set_enabled(True)

	assert handler.pointer_up() is None
	assert box.writes == []


def test_refused_write_skips_drag_end (grid_host) -> None:

	"""When the store refuses the write, no drag end is reported."""

	ends = []
	box = PairBox(accept=False)
	handler = make_handler(grid_host, box, on_drag_end=lambda pairs, result: ends.append(result))

	handler.start_drag(3, 3)

	assert handler.pointer_up() is None
	assert ends == []
	assert handler.is_active is False


def test_fill_gaps_runs_before_commit (grid_host) -> None:

	"""The optional normaliser shapes the committed list."""

	box = PairBox()
	handler = make_handler(grid_host, box, fill_gaps=intervallic.gap_filler.fill_gaps_with_silences)

	handler.start_drag(7, 2)
	handler.pointer_up()

	assert box.pairs == [Pair(0, 0, 2, True), Pair(7, 2)]


def test_space_helpers () -> None:

	"""Start and end cells of a pair."""

	pair = Pair(1, 3, 4)

	assert intervallic.drag.start_space_of(pair) == 3
	assert intervallic.drag.end_space_of(pair) == 6
