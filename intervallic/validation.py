"""Scalar validation and the shared error vocabulary.

Nothing in here raises for bad input.  Every check returns a result object
and every problem is described by an :class:`Issue` so the editor can render
inline diagnostics next to the offending token.
"""

import dataclasses
import enum
import typing

import intervallic.constants


class ErrorKind (enum.Enum):

	"""
	Kinds of problem reported by parsing and sequence validation.
	"""

	NOT_A_NUMBER = "not_a_number"
	OUT_OF_RANGE = "out_of_range"
	DUPLICATE_REMOVED = "duplicate_removed"			# time axis, informational
	REORDERED_ASCENDING = "reordered_ascending"		# time axis, informational
	PULSE_CONTINUITY_BROKEN = "pulse_continuity_broken"
	PULSE_OVERFLOW = "pulse_overflow"
	NON_POSITIVE_INTERVAL = "non_positive_interval"

	@property
	def informational (self) -> bool:

		"""True for notes that always accompany a successful, corrected value."""

		return self in (ErrorKind.DUPLICATE_REMOVED, ErrorKind.REORDERED_ASCENDING)


@dataclasses.dataclass(frozen=True)
class Issue:

	"""
	A single diagnostic.

	Attributes:
		kind: What went wrong.
		message: Human-readable description.
		token: The raw token that caused it, when it came from text.
		position: Token index within the parsed text, or element index within
			a validated sequence.
		bounds: The ``(min, max)`` range for ``OUT_OF_RANGE`` issues.
	"""

	kind: ErrorKind
	message: str
	token: typing.Optional[str] = None
	position: typing.Optional[int] = None
	bounds: typing.Optional[typing.Tuple[int, int]] = None

	def __str__ (self) -> str:

		"""The message alone."""

		return self.message


@dataclasses.dataclass(frozen=True)
class ScalarResult:

	"""
	Outcome of validating one raw value against an axis range.
	"""

	valid: bool
	value: typing.Any = None
	error: typing.Optional[Issue] = None


def _to_int (raw: typing.Any) -> typing.Optional[int]:

	"""Return ``raw`` as an int, or None when it does not look like an integer."""

	if isinstance(raw, bool):
		return None

	if isinstance(raw, int):
		return raw

	if isinstance(raw, float):
		return int(raw) if raw.is_integer() else None

	text = str(raw).strip()

	try:
		return int(text)
	except ValueError:
		pass

	# "2.0" is accepted like 2.0; "2.5", "inf" and "nan" are not.
	try:
		number = float(text)
	except ValueError:
		return None

	return int(number) if number.is_integer() else None


def validate_scalar (raw: typing.Any, min_value: int, max_value: int, label: str = "Value") -> ScalarResult:

	"""
	Validate a single scalar against an inclusive range.

	Accepts ints and numeric-looking strings (``"7"``, ``" 3 "``, ``"-1"``).
	Fails with ``NOT_A_NUMBER`` or ``OUT_OF_RANGE``; the failing result keeps
	the raw (or converted) value so callers can echo it back.
	"""

	value = _to_int(raw)

	if value is None:
		return ScalarResult(
			valid = False,
			value = raw,
			error = Issue(ErrorKind.NOT_A_NUMBER, f"{label} must be a number", token=str(raw))
		)

	if value < min_value or value > max_value:
		return ScalarResult(
			valid = False,
			value = value,
			error = Issue(
				ErrorKind.OUT_OF_RANGE,
				f"{label} must be between {min_value} and {max_value}",
				token = str(raw),
				bounds = (min_value, max_value)
			)
		)

	return ScalarResult(valid=True, value=value)


def validate_note (raw: typing.Any, min_value: int = intervallic.constants.DEFAULT_NOTE_RANGE[0], max_value: int = intervallic.constants.DEFAULT_NOTE_RANGE[1]) -> ScalarResult:

	"""Validate a sound axis value."""

	return validate_scalar(raw, min_value, max_value, label="Note")


def validate_pulse (raw: typing.Any, min_value: int = intervallic.constants.DEFAULT_PULSE_RANGE[0], max_value: int = intervallic.constants.DEFAULT_PULSE_RANGE[1]) -> ScalarResult:

	"""Validate a time axis value."""

	return validate_scalar(raw, min_value, max_value, label="Pulse")
