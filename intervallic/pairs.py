"""Value types for the absolute and relative views of a sequence.

A :class:`Pair` is an absolute event on the two axes: it starts at ``pulse``
on axis value ``note`` and lasts ``temporal_interval`` steps.  An
:class:`Interval` is the same event expressed relative to the previous
*sounding* pair.  Both are frozen - every edit produces a new list of new
objects, never a patched field on a stored one.
"""

import dataclasses
import typing


@dataclasses.dataclass(frozen=True)
class BasePair:

	"""
	The anchor from which the first interval is measured.
	"""

	note: int = 0
	pulse: int = 0


@dataclasses.dataclass(frozen=True)
class Pair:

	"""
	A sounding (or resting) event on the note/pulse grid.

	Attributes:
		note: Sound axis value.  For rests this is the inherited pitch of the
			last sounding pair and is only used for display.
		pulse: Time axis index where the event starts.
		temporal_interval: Length in pulses (always >= 1).
		is_rest: True when the event is silence.
	"""

	note: int
	pulse: int
	temporal_interval: int = 1
	is_rest: bool = False

	def __post_init__ (self) -> None:

		"""Reject lengths below one pulse."""

		if self.temporal_interval < 1:
			raise ValueError(f"temporal_interval must be a positive integer, got {self.temporal_interval}")

	@property
	def key (self) -> str:

		"""Identity string used for fast membership tests (``"note-pulse"``)."""

		return f"{self.note}-{self.pulse}"

	@property
	def end_pulse (self) -> int:

		"""Exclusive end of the occupied span."""

		return self.pulse + self.temporal_interval

	def overlaps (self, pulse: int, temporal_interval: int) -> bool:

		"""Return True if this pair's span shares any pulse with ``[pulse, pulse + temporal_interval - 1]``."""

		last = self.end_pulse - 1
		other_last = pulse + temporal_interval - 1

		return self.pulse <= other_last and last >= pulse

	def with_span (self, pulse: int, temporal_interval: int) -> "Pair":

		"""Return a copy starting at ``pulse`` with a new length."""

		return dataclasses.replace(self, pulse=pulse, temporal_interval=temporal_interval)


@dataclasses.dataclass(frozen=True)
class Interval:

	"""
	A step relative to the previous sounding pair.

	``temporal_interval`` is not checked here: interval chains are authored
	input, and malformed steps are reported by
	:func:`intervallic.converter.validate_interval_sequence` or skipped by
	:func:`intervallic.converter.build_pairs_from_intervals`.
	"""

	sound_interval: int
	temporal_interval: int = 1
	is_rest: bool = False


@dataclasses.dataclass(frozen=True)
class Gap:

	"""
	A span of undefined time between two pairs.
	"""

	start_pulse: int
	size: int
