"""Sequencer settings and YAML loading.

A settings file may hold the keys at top level or under a ``sequencer:``
section::

	sequencer:
	  note_range: [0, 11]
	  pulse_range: [0, 7]
	  total_spaces: 8
	  base_pair: {note: 0, pulse: 0}
	  polyphony: false
	  debounce_ms: 50
"""

import dataclasses
import logging
import os
import typing

import yaml

import intervallic.constants

from intervallic.pairs import BasePair


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class SequencerConfig:

	"""
	Settings shared by the editor, sync manager, drag handler and controller.

	Attributes:
		note_range: Inclusive bounds of the sound axis.
		pulse_range: Inclusive bounds of the time axis.
		total_spaces: Draggable cells along the time axis.
		max_pulse: Exclusive end of the time axis for sequence validation.
		base_pair: Anchor of the first interval.
		auto_fill_gaps: Fill gaps with rests whenever pairs are set.
		polyphony: Allow overlapping spans.
		wrap_around: Fold notes built from intervals back into ``note_range``.
		debounce_ms: Editor -> store debounce window.
		highlight_ms: Default interval highlight duration.
		notice_ms: Auto-dismiss delay for out-of-range notices (None = manual).
	"""

	note_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_NOTE_RANGE
	pulse_range: typing.Tuple[int, int] = intervallic.constants.DEFAULT_PULSE_RANGE
	total_spaces: int = intervallic.constants.DEFAULT_TOTAL_SPACES
	max_pulse: int = intervallic.constants.DEFAULT_MAX_PULSE
	base_pair: BasePair = dataclasses.field(default_factory=BasePair)
	auto_fill_gaps: bool = True
	polyphony: bool = False
	wrap_around: bool = False
	debounce_ms: int = intervallic.constants.DEFAULT_DEBOUNCE_MS
	highlight_ms: int = intervallic.constants.DEFAULT_HIGHLIGHT_MS
	notice_ms: typing.Optional[int] = intervallic.constants.DEFAULT_NOTICE_MS

	def __post_init__ (self) -> None:

		"""Reject inverted ranges, an empty grid and a negative debounce window."""

		for name in ("note_range", "pulse_range"):

			low, high = getattr(self, name)

			if low > high:
				raise ValueError(f"{name} must be (min, max), got ({low}, {high})")

		if self.total_spaces < 1:
			raise ValueError(f"total_spaces must be positive, got {self.total_spaces}")

		if self.debounce_ms < 0:
			raise ValueError(f"debounce_ms cannot be negative, got {self.debounce_ms}")

	@classmethod
	def from_dict (cls, data: typing.Optional[typing.Mapping[str, typing.Any]]) -> "SequencerConfig":

		"""
		Build a config from a plain mapping (as loaded from YAML).

		Unknown keys raise ``ValueError`` so typos do not pass silently.
		"""

		if not data:
			return cls()

		known = {f.name for f in dataclasses.fields(cls)}
		unknown = set(data) - known

		if unknown:
			raise ValueError(f"Unknown sequencer setting(s): {', '.join(sorted(unknown))}")

		values = dict(data)

		for name in ("note_range", "pulse_range"):
			if name in values:
				values[name] = tuple(values[name])

		if "base_pair" in values and not isinstance(values["base_pair"], BasePair):
			values["base_pair"] = BasePair(**values["base_pair"])

		return cls(**values)


def load_config (config_path: str = "intervallic.yaml") -> SequencerConfig:

	"""
	Load settings from a YAML file, falling back to defaults if it is missing.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return SequencerConfig()

	with open(config_path, "r") as f:
		data = yaml.safe_load(f) or {}

	if "sequencer" in data:
		data = data["sequencer"]

	logger.info(f"Loaded sequencer settings from {config_path}")

	return SequencerConfig.from_dict(data)
