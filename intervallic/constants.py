"""Default axis ranges and timing windows shared by every component."""

import typing


# Sound axis (scale degree / chromatic pitch class), inclusive.
DEFAULT_NOTE_RANGE: typing.Tuple[int, int] = (0, 11)

# Time axis (pulse / step index), inclusive.
DEFAULT_PULSE_RANGE: typing.Tuple[int, int] = (0, 7)

# Number of draggable cells across the time axis.
DEFAULT_TOTAL_SPACES: int = 8

# Exclusive end of the time axis used by sequence validation.
DEFAULT_MAX_PULSE: int = 8

DEFAULT_DEBOUNCE_MS: int = 50
DEFAULT_HIGHLIGHT_MS: int = 300
DEFAULT_NOTICE_MS: int = 2000
