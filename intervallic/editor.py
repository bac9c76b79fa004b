"""Headless dual text editor for the sound (N) and time (P) axes.

The editor owns two text surfaces.  A host UI relays keystrokes into
:meth:`DualEditor.input_notes` / :meth:`DualEditor.input_pulses`, Enter
presses into :meth:`DualEditor.press_enter` and focus loss into
:meth:`DualEditor.blur`; whenever the editor rewrites a surface itself it
reports the new text through ``on_text_change`` so the host can redraw.

Live typing is validated but never rewritten: problems are reported and
out-of-range tokens raise a transient notice that dismisses itself after
``notice_ms``.  Enter and blur *sanitize* the field - invalid tokens are
dropped and, on the time axis, duplicates removed and the order forced
ascending.
"""

import contextlib
import dataclasses
import enum
import logging
import typing

import intervallic.constants
import intervallic.parser
import intervallic.timer
import intervallic.validation

from intervallic.pairs import Pair
from intervallic.parser import AxisKind, AxisParseResult
from intervallic.validation import ErrorKind, Issue


logger = logging.getLogger(__name__)


class EditorState (enum.Enum):

	"""Whether the editor is writing its own surfaces (input is ignored meanwhile)."""

	IDLE = "idle"
	UPDATING = "updating"


@dataclasses.dataclass(frozen=True)
class Notice:

	"""
	A transient inline message tied to a token on one axis.
	"""

	axis: AxisKind
	issue: Issue

	@property
	def position (self) -> typing.Optional[int]:

		"""Token index of the offending value."""

		return self.issue.position

	@property
	def message (self) -> str:

		"""Text to show next to the token."""

		value = self.issue.token
		low, high = self.issue.bounds or (None, None)

		if self.axis is AxisKind.TIME:
			return f"Pulse {value} is outside the length. Choose {low}-{high}"

		return f"Number {value} is out of range. Choose {low}-{high}"


class AxisField:

	"""
	One editable surface: its text, its parsed values and its live errors.
	"""

	def __init__ (self, kind: AxisKind, value_range: typing.Tuple[int, int]) -> None:

		"""Start with empty text for one axis."""

		self.kind = kind
		self.value_range = tuple(value_range)
		self.text = ""
		self.values: typing.List[int] = []
		self.errors: typing.List[Issue] = []

	def parse (self, text: str) -> AxisParseResult:

		"""Parse text under this field's axis rules and range."""

		return intervallic.parser.parse_axis_tokens(text, self.value_range[0], self.value_range[1], self.kind)

	def sanitized_text (self) -> str:

		"""The canonical text for the current input, with invalid tokens dropped."""

		low, high = self.value_range
		kept = [
			token for token in intervallic.parser.tokenize(self.text)
			if intervallic.validation.validate_scalar(token, low, high).valid
		]

		return intervallic.parser.serialize_values(self.parse(" ".join(kept)).values)


PairsCallback = typing.Callable[[typing.List[Pair]], typing.Any]
ValuesCallback = typing.Callable[[typing.List[int], typing.List[Issue]], typing.Any]


class DualEditor:

	"""
	Two coupled text surfaces that together describe a pair list.

	Notes and pulses are zipped into pairs up to the shorter list.  Typing
	notes into an empty pulse field fills it with ``0..n-1`` so the notes
	are immediately playable.

	Parameters:
		note_range: Inclusive bounds of the sound axis.
		pulse_range: Inclusive bounds of the time axis.
		on_pairs_change: Called with the zipped pairs after every change.
		on_notes_change: Called with ``(values, errors)`` after note input.
		on_pulses_change: Called with ``(values, errors)`` after pulse input.
		on_enter_from_note: Replaces the default Enter behaviour (focus pulses).
		on_enter_from_pulse: Replaces the default Enter behaviour (focus notes).
		on_text_change: Called with ``(axis, text)`` when the editor rewrites a surface.
		on_notice: Called with ``(notice, shown)`` when a notice appears or goes away.
		notice_ms: Auto-dismiss delay for notices; ``None`` keeps them until replaced.
	"""

	def __init__ (
		self,
		note_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_NOTE_RANGE,
		pulse_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_PULSE_RANGE,
		on_pairs_change: typing.Optional[PairsCallback] = None,
		on_notes_change: typing.Optional[ValuesCallback] = None,
		on_pulses_change: typing.Optional[ValuesCallback] = None,
		on_enter_from_note: typing.Optional[typing.Callable[[], typing.Any]] = None,
		on_enter_from_pulse: typing.Optional[typing.Callable[[], typing.Any]] = None,
		on_text_change: typing.Optional[typing.Callable[[AxisKind, str], typing.Any]] = None,
		on_notice: typing.Optional[typing.Callable[[Notice, bool], typing.Any]] = None,
		notice_ms: typing.Optional[int] = intervallic.constants.DEFAULT_NOTICE_MS
	) -> None:

		"""Create both fields empty, with the note field focused."""

		self.fields: typing.Dict[AxisKind, AxisField] = {
			AxisKind.SOUND: AxisField(AxisKind.SOUND, note_range),
			AxisKind.TIME: AxisField(AxisKind.TIME, pulse_range),
		}

		self.on_pairs_change = on_pairs_change
		self.on_notes_change = on_notes_change
		self.on_pulses_change = on_pulses_change
		self.on_enter_from_note = on_enter_from_note
		self.on_enter_from_pulse = on_enter_from_pulse
		self.on_text_change = on_text_change
		self.on_notice = on_notice
		self.notice_ms = notice_ms

		self.focused: typing.Optional[AxisKind] = None
		self.state = EditorState.IDLE

		self._notices: typing.Dict[AxisKind, typing.List[Notice]] = {AxisKind.SOUND: [], AxisKind.TIME: []}
		self._notice_timers: typing.Dict[AxisKind, intervallic.timer.CancellableTimer] = {}

		if notice_ms is not None:
			for axis in self.fields:
				self._notice_timers[axis] = intervallic.timer.CancellableTimer(
					notice_ms / 1000.0,
					lambda axis=axis: self.dismiss_notices(axis)
				)


	# ─── Read access ───────────────────────────────────────────────────────

	@property
	def note_text (self) -> str:

		"""Current text of the note field."""

		return self.fields[AxisKind.SOUND].text

	@property
	def pulse_text (self) -> str:

		"""Current text of the pulse field."""

		return self.fields[AxisKind.TIME].text

	def notes (self) -> typing.List[int]:

		"""Valid note values parsed from the note field."""

		return list(self.fields[AxisKind.SOUND].values)

	def pulses (self) -> typing.List[int]:

		"""Canonical pulse values parsed from the pulse field."""

		return list(self.fields[AxisKind.TIME].values)

	def errors (self, axis: AxisKind) -> typing.List[Issue]:

		"""Issues reported for one field's current text."""

		return list(self.fields[axis].errors)

	def pairs (self) -> typing.List[Pair]:

		"""Notes and pulses zipped to the shorter list."""

		return intervallic.parser.create_pairs(self.notes(), self.pulses())

	@property
	def notices (self) -> typing.List[Notice]:

		"""Every notice currently shown, note field first."""

		return self._notices[AxisKind.SOUND] + self._notices[AxisKind.TIME]


	# ─── Host events ───────────────────────────────────────────────────────

	def input_notes (self, text: str) -> bool:

		"""
		The note surface now reads ``text``.  Returns False if ignored
		because the editor is rewriting its own surfaces.
		"""

		if self.state is EditorState.UPDATING:
			return False

		field = self.fields[AxisKind.SOUND]
		result = self._take_input(field, text)

		if self.on_notes_change:
			self.on_notes_change(list(result.values), list(result.errors))

		if result.values and not self.fields[AxisKind.TIME].values:
			self.set_pulses(intervallic.parser.auto_complete_pulses(len(result.values), self.fields[AxisKind.TIME].value_range[1]))
		else:
			self._emit_pairs()

		return True

	def input_pulses (self, text: str) -> bool:

		"""
		The pulse surface now reads ``text``.  Duplicates and order are
		reported, and the emitted pulses are already canonical, but the
		text itself is only rewritten on Enter or blur.
		"""

		if self.state is EditorState.UPDATING:
			return False

		field = self.fields[AxisKind.TIME]
		result = self._take_input(field, text)

		if self.on_pulses_change:
			self.on_pulses_change(list(result.values), list(result.errors))

		self._emit_pairs()

		return True

	def focus (self, axis: AxisKind) -> None:

		"""Record which field has focus."""

		self.focused = axis

	def press_enter (self, axis: AxisKind) -> None:

		"""Sanitize the field and advance focus to the other one (or run the override)."""

		self.sanitize(axis)

		if axis is AxisKind.SOUND:
			if self.on_enter_from_note:
				self.on_enter_from_note()
			else:
				self.focused = AxisKind.TIME
		else:
			if self.on_enter_from_pulse:
				self.on_enter_from_pulse()
			else:
				self.focused = AxisKind.SOUND

	def blur (self, axis: AxisKind) -> None:

		"""Sanitize the field and drop focus from it."""

		self.sanitize(axis)

		if self.focused is axis:
			self.focused = None

	def sanitize (self, axis: AxisKind) -> bool:

		"""
		Rewrite the field to its canonical text.  Returns True if the text changed.
		"""

		field = self.fields[axis]
		canonical = field.sanitized_text()

		if canonical == field.text:
			return False

		logger.debug(f"Sanitized {axis.value} field {field.text!r} -> {canonical!r}")

		values = field.parse(canonical).values

		if axis is AxisKind.SOUND:
			self.set_notes(values)
		else:
			self.set_pulses(values)

		return True


	# ─── Programmatic writes ───────────────────────────────────────────────

	def set_notes (self, notes: typing.Sequence[int]) -> None:

		"""Replace the note field with canonical text for ``notes``."""

		self._write(AxisKind.SOUND, notes)

	def set_pulses (self, pulses: typing.Sequence[int]) -> None:

		"""Replace the pulse field with canonical text for ``pulses``."""

		self._write(AxisKind.TIME, pulses)

	def clear (self) -> None:

		"""Empty both surfaces and report an empty pair list."""

		with self._updating():
			for axis, field in self.fields.items():
				field.text = ""
				field.values = []
				field.errors = []
				self._announce_text(axis, "")

		for axis in self.fields:
			self.dismiss_notices(axis)

		if self.on_pairs_change:
			self.on_pairs_change([])

	def dismiss_notices (self, axis: AxisKind) -> None:

		"""Remove one field's notices and cancel its dismiss timer."""

		timer = self._notice_timers.get(axis)

		if timer is not None:
			timer.cancel()

		dismissed, self._notices[axis] = self._notices[axis], []

		if self.on_notice:
			for notice in dismissed:
				self.on_notice(notice, False)

	def destroy (self) -> None:

		"""Cancel pending notice timers."""

		for timer in self._notice_timers.values():
			timer.cancel()


	# ─── Internals ─────────────────────────────────────────────────────────

	@contextlib.contextmanager
	def _updating (self) -> typing.Iterator[None]:

		"""Mark the editor as rewriting its own surfaces for the duration of the block."""

		previous = self.state
		self.state = EditorState.UPDATING

		try:
			yield
		finally:
			self.state = previous

	def _write (self, axis: AxisKind, values: typing.Sequence[int]) -> None:

		"""Rewrite one field programmatically, then emit pairs."""

		field = self.fields[axis]

		with self._updating():
			field.text = intervallic.parser.serialize_values(values)
			field.values = list(values)
			field.errors = []
			self._announce_text(axis, field.text)

		self._emit_pairs()

	def _take_input (self, field: AxisField, text: str) -> AxisParseResult:

		"""Store typed text with its parsed values and errors."""

		result = field.parse(text)

		field.text = text
		field.values = list(result.values)
		field.errors = list(result.errors)

		self._show_notices(field.kind, [issue for issue in result.errors if issue.kind is ErrorKind.OUT_OF_RANGE])

		return result

	def _show_notices (self, axis: AxisKind, issues: typing.List[Issue]) -> None:

		"""Replace one field's notices and start its dismiss timer."""

		self.dismiss_notices(axis)

		if not issues:
			return

		self._notices[axis] = [Notice(axis, issue) for issue in issues]

		if self.on_notice:
			for notice in self._notices[axis]:
				self.on_notice(notice, True)

		timer = self._notice_timers.get(axis)

		if timer is None:
			return

		try:
			timer.start()
		except RuntimeError:
			logger.debug("No running event loop - notice stays until the next input")

	def _announce_text (self, axis: AxisKind, text: str) -> None:

		"""Tell the host a field's text was rewritten."""

		if self.on_text_change:
			self.on_text_change(axis, text)

	def _emit_pairs (self) -> None:

		"""Report the current pairs."""

		if self.on_pairs_change:
			self.on_pairs_change(self.pairs())
