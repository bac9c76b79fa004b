"""Detect and fill temporal gaps so a sequence has no undefined spans.

All functions sort by pulse internally and never trust the caller's order.
A gap before a pair is filled with a rest that carries the previous
*sounding* note (or the base note when nothing has sounded yet).
"""

import typing

from intervallic.pairs import BasePair, Gap, Pair


def _by_pulse (pairs: typing.Iterable[Pair]) -> typing.List[Pair]:

	"""Sort pairs by starting pulse."""

	return sorted(pairs, key=lambda pair: pair.pulse)


def detect_gaps (pairs: typing.Iterable[Pair], base_pair: BasePair = BasePair()) -> typing.List[Gap]:

	"""
	Find every span where nothing is playing, starting from ``base_pair.pulse``.

	Example:
		```python
		detect_gaps([Pair(3, 0, 2), Pair(5, 5, 1)])
		# [Gap(start_pulse=2, size=3)]
		```
	"""

	gaps: typing.List[Gap] = []
	expected_pulse = base_pair.pulse

	for pair in _by_pulse(pairs):

		if pair.pulse > expected_pulse:
			gaps.append(Gap(start_pulse=expected_pulse, size=pair.pulse - expected_pulse))

		expected_pulse = pair.end_pulse

	return gaps


def has_gaps (pairs: typing.Iterable[Pair], base_pair: BasePair = BasePair()) -> bool:

	"""True if any span between ``base_pair.pulse`` and the last pair is undefined."""

	return bool(detect_gaps(pairs, base_pair))


def fill_gaps_with_silences (pairs: typing.Iterable[Pair], base_pair: BasePair = BasePair()) -> typing.List[Pair]:

	"""
	Return the pairs sorted by pulse with a rest inserted into every gap.

	Filling an already gap-free sequence returns an equal list.
	"""

	result: typing.List[Pair] = []
	expected_pulse = base_pair.pulse
	last_sounding_note = base_pair.note

	for pair in _by_pulse(pairs):

		if pair.pulse > expected_pulse:
			result.append(Pair(
				note = last_sounding_note,
				pulse = expected_pulse,
				temporal_interval = pair.pulse - expected_pulse,
				is_rest = True
			))

		result.append(pair)
		expected_pulse = pair.end_pulse

		if not pair.is_rest:
			last_sounding_note = pair.note

	return result


def calculate_total_duration (pairs: typing.Iterable[Pair]) -> int:

	"""Sum of every pair's length in pulses."""

	return sum(pair.temporal_interval for pair in pairs)


def remove_silences (pairs: typing.Iterable[Pair]) -> typing.List[Pair]:

	"""Drop rests - the inverse filter of :func:`fill_gaps_with_silences`."""

	return [pair for pair in pairs if not pair.is_rest]
