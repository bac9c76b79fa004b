"""Turn free-form axis text into validated value lists.

The two axes follow different rules:

- **Sound axis** (notes): any order, duplicates allowed.  Invalid tokens are
  reported and skipped; the valid ones are kept.
- **Time axis** (pulses): duplicates removed, forced ascending.  Any
  invalid token withholds the whole list so a half-typed pulse sequence is
  never paired up.  When dedup or reordering changed the sequence the
  result is flagged ``sanitized`` and carries informational notes.

Parsing never raises.
"""

import dataclasses
import enum
import typing

import intervallic.constants
import intervallic.pairs
import intervallic.validation

from intervallic.validation import ErrorKind, Issue


class AxisKind (enum.Enum):

	"""Which axis a piece of text belongs to."""

	SOUND = "sound"
	TIME = "time"


@dataclasses.dataclass
class AxisParseResult:

	"""
	Outcome of parsing one axis' text.

	Attributes:
		values: Validated values in canonical order.
		errors: Token errors plus any informational sanitation notes.
		sanitized: True when duplicates were removed or the order changed.
	"""

	values: typing.List[int] = dataclasses.field(default_factory=list)
	errors: typing.List[Issue] = dataclasses.field(default_factory=list)
	sanitized: bool = False

	@property
	def valid (self) -> bool:

		"""True when no token failed validation (informational notes do not count)."""

		return all(issue.kind.informational for issue in self.errors)


def tokenize (text: typing.Optional[str]) -> typing.List[str]:

	"""Split on any run of whitespace."""

	if not text:
		return []

	return text.split()


def serialize_values (values: typing.Iterable[int]) -> str:

	"""Render a value list back to canonical editor text."""

	return " ".join(str(v) for v in values)


def parse_axis_tokens (
	text: typing.Optional[str],
	min_value: int,
	max_value: int,
	kind: AxisKind = AxisKind.SOUND
) -> AxisParseResult:

	"""
	Parse whitespace-delimited tokens for one axis.

	Parameters:
		text: Raw editor text.
		min_value: Inclusive lower bound.
		max_value: Inclusive upper bound.
		kind: ``AxisKind.SOUND`` keeps order and duplicates;
			``AxisKind.TIME`` deduplicates and sorts.

	Example:
		```python
		result = parse_axis_tokens("4 1 6", 0, 7, AxisKind.TIME)
		result.values     # [1, 4, 6]
		result.sanitized  # True
		```
	"""

	label = "Pulse" if kind is AxisKind.TIME else "Note"
	result = AxisParseResult()

	for position, token in enumerate(tokenize(text)):

		checked = intervallic.validation.validate_scalar(token, min_value, max_value, label=label)

		if checked.valid:
			result.values.append(checked.value)
		else:
			result.errors.append(dataclasses.replace(checked.error, token=token, position=position))

	if kind is AxisKind.SOUND:
		return result

	if result.errors:
		return AxisParseResult(values=[], errors=result.errors, sanitized=False)

	deduplicated = list(dict.fromkeys(result.values))

	if len(deduplicated) != len(result.values):
		result.sanitized = True
		result.errors.append(Issue(ErrorKind.DUPLICATE_REMOVED, "Duplicate pulses removed"))

	ordered = sorted(deduplicated)

	if ordered != deduplicated:
		result.sanitized = True
		result.errors.append(Issue(ErrorKind.REORDERED_ASCENDING, "Pulses reordered ascending"))

	result.values = ordered

	return result


def parse_notes (
	text: typing.Optional[str],
	min_value: int = intervallic.constants.DEFAULT_NOTE_RANGE[0],
	max_value: int = intervallic.constants.DEFAULT_NOTE_RANGE[1]
) -> AxisParseResult:

	"""Parse sound axis text (order and duplicates preserved)."""

	return parse_axis_tokens(text, min_value, max_value, AxisKind.SOUND)


def parse_pulses (
	text: typing.Optional[str],
	min_value: int = intervallic.constants.DEFAULT_PULSE_RANGE[0],
	max_value: int = intervallic.constants.DEFAULT_PULSE_RANGE[1]
) -> AxisParseResult:

	"""Parse time axis text (deduplicated, ascending)."""

	return parse_axis_tokens(text, min_value, max_value, AxisKind.TIME)


def auto_complete_pulses (count: int, max_value: int = intervallic.constants.DEFAULT_PULSE_RANGE[1]) -> typing.List[int]:

	"""Sequential pulses ``0..count-1``, capped to the axis."""

	return list(range(min(count, max_value + 1)))


def create_pairs (notes: typing.Sequence[int], pulses: typing.Sequence[int]) -> typing.List[intervallic.pairs.Pair]:

	"""Zip the two axis lists into pairs, truncating to the shorter one."""

	return [intervallic.pairs.Pair(note=n, pulse=p) for n, p in zip(notes, pulses)]


def decompose_pairs (pairs: typing.Iterable[intervallic.pairs.Pair]) -> typing.Tuple[typing.List[int], typing.List[int]]:

	"""Split pairs back into ``(notes, pulses)`` in stored order."""

	notes: typing.List[int] = []
	pulses: typing.List[int] = []

	for pair in pairs:
		notes.append(pair.note)
		pulses.append(pair.pulse)

	return notes, pulses
