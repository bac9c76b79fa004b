import typing

import pytest

import intervallic.drag
import intervallic.pairs


class FakeGridHost:

	"""Grid host stub: a 12 x 8 grid drawn 400 units wide, cells named by coordinate."""

	def __init__ (self, notes: int = 12, spaces: int = 8, width: float = 400.0, left: float = 0.0) -> None:

		"""Store the grid geometry."""

		self.notes = notes
		self.spaces = spaces
		self.bounds: typing.Optional[intervallic.drag.Bounds] = intervallic.drag.Bounds(left=left, top=0.0, width=width, height=200.0)

	def get_cell_element (self, note: int, pulse: int) -> typing.Optional[typing.Tuple[int, int]]:

		"""Return a cell handle, or None off the grid."""

		if 0 <= note < self.notes and 0 <= pulse < self.spaces:
			return (note, pulse)

		return None

	def get_matrix_container_bounds (self) -> typing.Optional[intervallic.drag.Bounds]:

		"""Return the container rectangle."""

		return self.bounds

	def x_for_space (self, space: int) -> float:

		"""Pointer x coordinate in the middle of a cell."""

		assert self.bounds is not None
		width = self.bounds.width / self.spaces

		return self.bounds.left + width * space + width / 2


class RecordingRenderer:

	"""Renderer stub that records every call."""

	def __init__ (self) -> None:

		"""Start with empty call logs."""

		self.rendered: typing.List[typing.List[intervallic.pairs.Interval]] = []
		self.highlights: typing.List[typing.Tuple[int, int]] = []
		self.destroyed = False

	def render (self, intervals: typing.List[intervallic.pairs.Interval]) -> None:

		"""Record the interval chain."""

		self.rendered.append(list(intervals))

	def highlight_bar (self, index: int, duration_ms: int) -> None:

		"""Record the highlight request."""

		self.highlights.append((index, duration_ms))

	def destroy (self) -> None:

		"""Record teardown."""

		self.destroyed = True


@pytest.fixture
def grid_host () -> FakeGridHost:

	"""A fresh 12 x 8 grid host."""

	return FakeGridHost()


@pytest.fixture
def renderer () -> RecordingRenderer:

	"""A fresh recording renderer."""

	return RecordingRenderer()
