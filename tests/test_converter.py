import pytest

import intervallic.converter
import intervallic.gap_filler

from intervallic.pairs import BasePair, Interval, Pair
from intervallic.validation import ErrorKind


def test_pairs_to_intervals_basic () -> None:

	"""Each interval is the step from the previous note, lengths carried over."""

	intervals = intervallic.converter.pairs_to_intervals([Pair(3, 0, 2), Pair(5, 2, 1)], BasePair(0, 0))

	assert intervals == [Interval(3, 2, False), Interval(2, 1, False)]


def test_first_interval_measured_from_base () -> None:

	"""The base note anchors the first step."""

	intervals = intervallic.converter.pairs_to_intervals([Pair(4, 0)], BasePair(note=6, pulse=0))

	assert intervals == [Interval(-2, 1)]


def test_rest_does_not_shift_pitch_reference () -> None:

	"""After a rest the next step is measured from the last sounding note."""

	pairs = [Pair(7, 0), Pair(2, 1, 2, is_rest=True), Pair(9, 3)]

	intervals = intervallic.converter.pairs_to_intervals(pairs, BasePair(0, 0))

	assert intervals == [Interval(7, 1), Interval(0, 2, True), Interval(2, 1)]


def test_build_pairs_from_intervals () -> None:

	"""Pulses accumulate from the base pulse, notes from the base note."""

	pairs = intervallic.converter.build_pairs_from_intervals(BasePair(0, 0), [Interval(3, 2), Interval(2, 1)])

	assert pairs == [Pair(3, 0, 2), Pair(5, 2, 1)]


def test_build_rest_inherits_last_sounding_note () -> None:

	"""Rests are placed on the last sounding note and do not move it."""

	pairs = intervallic.converter.build_pairs_from_intervals(
		BasePair(2, 1),
		[Interval(5, 1), Interval(0, 3, True), Interval(-1, 1)]
	)

	assert pairs == [Pair(7, 1), Pair(7, 2, 3, True), Pair(6, 5)]


def test_build_skips_non_positive_steps () -> None:

	"""Malformed steps are dropped without advancing the cursor."""

	pairs = intervallic.converter.build_pairs_from_intervals(
		BasePair(0, 0),
		[Interval(2, 1), Interval(5, 0), Interval(1, -2), Interval(1, 1)]
	)

	assert pairs == [Pair(2, 0), Pair(3, 1)]


def test_build_wrap_around () -> None:

	"""Wrapping folds notes back into the range in both directions."""

	pairs = intervallic.converter.build_pairs_from_intervals(
		BasePair(10, 0),
		[Interval(3, 1), Interval(-4, 1)],
		wrap_around = True,
		note_range = (0, 11)
	)

	assert [p.note for p in pairs] == [1, 9]


def test_build_without_wrap_leaves_notes_unbounded () -> None:

	"""Without wrapping, notes may leave the range."""

	pairs = intervallic.converter.build_pairs_from_intervals(BasePair(10, 0), [Interval(3, 1)])

	assert pairs[0].note == 13


@pytest.mark.parametrize("base", [BasePair(0, 0), BasePair(5, 0), BasePair(11, 2)])
def test_round_trip_from_pairs (base: BasePair) -> None:

	"""Gap-free pairs survive pairs -> intervals -> pairs for the same base."""

	start = base.pulse
	pairs = intervallic.gap_filler.fill_gaps_with_silences(
		[Pair(4, start, 2), Pair(9, start + 3, 1), Pair(0, start + 4, 3)],
		base
	)

	rebuilt = intervallic.converter.build_pairs_from_intervals(base, intervallic.converter.pairs_to_intervals(pairs, base))

	assert rebuilt == pairs


def test_round_trip_from_intervals () -> None:

	"""Valid chains survive intervals -> pairs -> intervals."""

	base = BasePair(3, 0)
	intervals = [Interval(2, 1), Interval(0, 2, True), Interval(-4, 3), Interval(6, 1)]

	pairs = intervallic.converter.build_pairs_from_intervals(base, intervals)

	assert intervallic.converter.pairs_to_intervals(pairs, base) == intervals


def test_validate_pair_sequence_valid () -> None:

	"""A contiguous in-range sequence is valid."""

	result = intervallic.converter.validate_pair_sequence([Pair(0, 0, 2), Pair(11, 2, 6)])

	assert result.valid
	assert result.errors == []
	assert result.invalid_index is None


def test_validate_pair_sequence_reports_all_problems () -> None:

	"""Range, continuity and overflow problems are all reported; the first index is flagged."""

	result = intervallic.converter.validate_pair_sequence([Pair(0, 0), Pair(3, 3), Pair(14, 4, 5)])

	assert not result.valid
	assert [e.kind for e in result.errors] == [
		ErrorKind.PULSE_CONTINUITY_BROKEN,
		ErrorKind.OUT_OF_RANGE,
		ErrorKind.PULSE_OVERFLOW,
	]
	assert result.invalid_index == 1


def test_validate_interval_sequence_out_of_range () -> None:

	"""A step that leaves the note range is flagged at its index."""

	result = intervallic.converter.validate_interval_sequence([Interval(15, 1)], BasePair(0, 0), note_range=(0, 11))

	assert result.valid is False
	assert result.invalid_index == 0
	assert result.errors[0].kind is ErrorKind.OUT_OF_RANGE


def test_validate_interval_sequence_non_positive_and_overflow () -> None:

	"""Non-positive and overflowing steps are reported; walking continues."""

	result = intervallic.converter.validate_interval_sequence(
		[Interval(1, 2), Interval(1, 0), Interval(1, 7)],
		BasePair(0, 0),
		max_pulse = 8
	)

	assert [e.kind for e in result.errors] == [ErrorKind.NON_POSITIVE_INTERVAL, ErrorKind.PULSE_OVERFLOW]
	assert [e.position for e in result.errors] == [1, 2]
	assert result.invalid_index == 1


def test_validate_interval_sequence_rest_keeps_reference () -> None:

	"""A rest's sound interval is ignored when checking the next step."""

	result = intervallic.converter.validate_interval_sequence(
		[Interval(11, 1), Interval(5, 1, True), Interval(-11, 1)],
		BasePair(0, 0)
	)

	assert result.valid


def test_interval_range_helpers () -> None:

	"""Range helpers mirror the room left on the grid."""

	assert intervallic.converter.get_interval_range(4) == (-4, 7)
	assert intervallic.converter.validate_sound_interval(4, 7) is None
	assert intervallic.converter.validate_sound_interval(4, 8).kind is ErrorKind.OUT_OF_RANGE


def test_validate_temporal_interval () -> None:

	"""Lengths must be positive and are shortened to the space left."""

	assert intervallic.converter.validate_temporal_interval(0, 0).valid is False

	adjusted = intervallic.converter.validate_temporal_interval(6, 4, max_pulse=8)

	assert adjusted.valid is True
	assert adjusted.adjusted == 2

	assert intervallic.converter.validate_temporal_interval(2, 3).adjusted is None


def test_format_interval () -> None:

	"""Sound intervals get an explicit plus sign; temporal ones do not."""

	assert intervallic.converter.format_interval(3) == "+3"
	assert intervallic.converter.format_interval(-2) == "-2"
	assert intervallic.converter.format_interval(0) == "0"
	assert intervallic.converter.format_interval(3, "temporal") == "3"
