"""Bidirectional conversion between absolute pairs and relative intervals.

A pair list ``[(N1, P1), (N2, P2), ...]`` anchored at a base pair ``(N0, P0)``
becomes a chain of ``(sound_interval, temporal_interval, is_rest)`` steps:

- ``sound_interval`` is measured against the last *sounding* note.  A rest
  always has ``sound_interval == 0`` and does not move that reference.
- ``temporal_interval`` is the pair's own length; pulses are implied by
  accumulating lengths from ``P0``.

Given the same base pair the conversion is lossless for gap-free sequences::

	build_pairs_from_intervals(base, pairs_to_intervals(pairs, base)) == pairs
"""

import dataclasses
import logging
import typing

import intervallic.constants

from intervallic.pairs import BasePair, Interval, Pair
from intervallic.validation import ErrorKind, Issue


logger = logging.getLogger(__name__)

NoteRange = typing.Tuple[int, int]


@dataclasses.dataclass(frozen=True)
class SequenceValidation:

	"""
	Outcome of validating a pair or interval sequence.

	Attributes:
		valid: True when no issue was found.
		errors: Every issue, in sequence order.
		invalid_index: Index of the first offending element (for highlighting).
	"""

	valid: bool
	errors: typing.List[Issue] = dataclasses.field(default_factory=list)
	invalid_index: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class TemporalCheck:

	"""Outcome of :func:`validate_temporal_interval`."""

	valid: bool
	adjusted: typing.Optional[int] = None
	error: typing.Optional[Issue] = None


def _finish (errors: typing.List[Issue]) -> SequenceValidation:

	"""Wrap collected issues into a result, flagging the first offending index."""

	invalid_index = errors[0].position if errors else None

	return SequenceValidation(valid=not errors, errors=errors, invalid_index=invalid_index)


def _wrap (note: int, note_range: NoteRange) -> int:

	"""Fold a note into the inclusive range by modular arithmetic."""

	low, high = note_range
	size = high - low + 1

	return (note - low) % size + low


# ─── Conversion ───────────────────────────────────────────────────────────────


def pairs_to_intervals (pairs: typing.Iterable[Pair], base_pair: BasePair = BasePair()) -> typing.List[Interval]:

	"""
	Express pairs, in stored order, as steps relative to the last sounding note.

	Example:
		```python
		pairs_to_intervals([Pair(3, 0, 2), Pair(5, 2, 1)], BasePair(0, 0))
		# [Interval(3, 2, False), Interval(2, 1, False)]
		```
	"""

	intervals: typing.List[Interval] = []
	prev_note = base_pair.note

	for pair in pairs:

		if pair.is_rest:
			intervals.append(Interval(sound_interval=0, temporal_interval=pair.temporal_interval, is_rest=True))
			continue

		intervals.append(Interval(sound_interval=pair.note - prev_note, temporal_interval=pair.temporal_interval, is_rest=False))
		prev_note = pair.note

	return intervals


def build_pairs_from_intervals (
	base_pair: BasePair,
	intervals: typing.Iterable[Interval],
	wrap_around: bool = False,
	note_range: NoteRange = intervallic.constants.DEFAULT_NOTE_RANGE
) -> typing.List[Pair]:

	"""
	Rebuild absolute pairs by walking an interval chain from ``base_pair``.

	Steps with ``temporal_interval <= 0`` are skipped rather than failing the
	whole chain; the pulse cursor does not advance for them.

	Parameters:
		base_pair: Where the walk starts.  It is not itself emitted.
		intervals: The chain to walk.
		wrap_around: Fold each resulting note back into ``note_range``
			(e.g. mod 12 for a chromatic octave).
		note_range: Inclusive bounds used by ``wrap_around``.
	"""

	pairs: typing.List[Pair] = []
	current_note = base_pair.note
	current_pulse = base_pair.pulse
	last_sounding_note = current_note

	for index, interval in enumerate(intervals):

		if interval.temporal_interval <= 0:
			logger.warning(f"Skipping interval {index}: temporal_interval {interval.temporal_interval} is not positive")
			continue

		start = current_pulse
		current_pulse += interval.temporal_interval

		if interval.is_rest:
			pairs.append(Pair(note=last_sounding_note, pulse=start, temporal_interval=interval.temporal_interval, is_rest=True))
			continue

		current_note += interval.sound_interval

		if wrap_around:
			current_note = _wrap(current_note, note_range)

		last_sounding_note = current_note
		pairs.append(Pair(note=current_note, pulse=start, temporal_interval=interval.temporal_interval))

	return pairs


# ─── Validation ───────────────────────────────────────────────────────────────


def validate_pair_sequence (
	pairs: typing.Sequence[Pair],
	note_range: NoteRange = intervallic.constants.DEFAULT_NOTE_RANGE,
	max_pulse: int = intervallic.constants.DEFAULT_MAX_PULSE
) -> SequenceValidation:

	"""
	Check notes are in range, each pair starts where the previous one ended,
	and nothing runs past ``max_pulse`` (exclusive end of the time axis).
	"""

	low, high = note_range
	errors: typing.List[Issue] = []
	expected_pulse = pairs[0].pulse if pairs else 0

	for index, pair in enumerate(pairs):

		if not low <= pair.note <= high:
			errors.append(Issue(
				ErrorKind.OUT_OF_RANGE,
				f"Pair {index}: note {pair.note} out of range [{low}, {high}]",
				position = index,
				bounds = (low, high)
			))

		if index > 0 and pair.pulse != expected_pulse:
			errors.append(Issue(
				ErrorKind.PULSE_CONTINUITY_BROKEN,
				f"Pair {index}: expected pulse {expected_pulse}, got {pair.pulse}",
				position = index
			))

		if pair.end_pulse > max_pulse:
			errors.append(Issue(
				ErrorKind.PULSE_OVERFLOW,
				f"Pair {index}: end pulse {pair.end_pulse} exceeds max {max_pulse}",
				position = index
			))

		expected_pulse = pair.end_pulse

	return _finish(errors)


def validate_interval_sequence (
	intervals: typing.Sequence[Interval],
	base_pair: BasePair = BasePair(),
	note_range: NoteRange = intervallic.constants.DEFAULT_NOTE_RANGE,
	max_pulse: int = intervallic.constants.DEFAULT_MAX_PULSE
) -> SequenceValidation:

	"""
	Walk an interval chain and report every step that lands outside the grid.

	The walk keeps going after a bad step so all problems are reported at
	once; a non-positive step does not move the cursor.
	"""

	low, high = note_range
	errors: typing.List[Issue] = []
	current_note = base_pair.note
	current_pulse = base_pair.pulse

	for index, interval in enumerate(intervals):

		if interval.temporal_interval <= 0:
			errors.append(Issue(
				ErrorKind.NON_POSITIVE_INTERVAL,
				f"Interval {index}: temporal interval must be positive, got {interval.temporal_interval}",
				position = index
			))
			continue

		sound_interval = 0 if interval.is_rest else interval.sound_interval
		new_note = current_note + sound_interval
		new_pulse = current_pulse + interval.temporal_interval

		if not low <= new_note <= high:
			errors.append(Issue(
				ErrorKind.OUT_OF_RANGE,
				f"Interval {index}: sound interval {sound_interval} puts note at {new_note}, out of range [{low}, {high}]",
				position = index,
				bounds = (low, high)
			))

		if new_pulse > max_pulse:
			errors.append(Issue(
				ErrorKind.PULSE_OVERFLOW,
				f"Interval {index}: temporal interval {interval.temporal_interval} puts pulse at {new_pulse}, exceeds max {max_pulse}",
				position = index
			))

		current_note = new_note
		current_pulse = new_pulse

	return _finish(errors)


# ─── Single-step helpers ──────────────────────────────────────────────────────


def get_interval_range (current_note: int, note_range: NoteRange = intervallic.constants.DEFAULT_NOTE_RANGE) -> typing.Tuple[int, int]:

	"""The ``(min, max)`` sound interval that keeps the next note on the grid."""

	return note_range[0] - current_note, note_range[1] - current_note


def validate_sound_interval (current_note: int, proposed: int, note_range: NoteRange = intervallic.constants.DEFAULT_NOTE_RANGE) -> typing.Optional[Issue]:

	"""Return an ``OUT_OF_RANGE`` issue if ``proposed`` leaves the grid, else None."""

	low, high = get_interval_range(current_note, note_range)

	if low <= proposed <= high:
		return None

	return Issue(ErrorKind.OUT_OF_RANGE, f"Interval {proposed} is too large (allowed {low}..{high})", bounds=(low, high))


def validate_temporal_interval (current_pulse: int, proposed: int, max_pulse: int = intervallic.constants.DEFAULT_MAX_PULSE) -> TemporalCheck:

	"""
	Check a proposed length starting at ``current_pulse``.

	Non-positive lengths are invalid.  Lengths that run past ``max_pulse``
	are valid but come back with ``adjusted`` set to the space remaining.
	"""

	if proposed <= 0:
		return TemporalCheck(
			valid = False,
			error = Issue(ErrorKind.NON_POSITIVE_INTERVAL, "Temporal interval must be positive")
		)

	remaining = max_pulse - current_pulse

	if proposed > remaining:
		return TemporalCheck(
			valid = True,
			adjusted = remaining,
			error = Issue(ErrorKind.PULSE_OVERFLOW, f"Temporal interval shortened from {proposed} to {remaining}")
		)

	return TemporalCheck(valid=True)


def format_interval (value: int, kind: str = "sound") -> str:

	"""``+3`` / ``-2`` / ``0`` for sound intervals, the plain number for temporal ones."""

	if kind == "sound" and value > 0:
		return f"+{value}"

	return str(value)
