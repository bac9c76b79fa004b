"""
Intervallic - a two-axis note/pulse sequence model for Python.

A sequence is a set of coordinates on two independent axes: a *sound* axis
(pitch or scale degree, e.g. 0-11) and a *time* axis (pulse or step, e.g.
0-7).  Intervallic keeps three representations of that sequence consistent:

- **Absolute pairs.** ``Pair(note, pulse, temporal_interval, is_rest)`` in
  a canonical, order-preserving store.
- **Relative intervals.** ``Interval(sound_interval, temporal_interval,
  is_rest)`` chains anchored at a base pair, measured against the last
  sounding note so rests never shift the pitch reference.
- **Memory grid.** Every cell switched on, remembered across grid resizes.

Editing tools:

- **Text entry.** Two text fields (notes, pulses) parsed token by token,
  with inline diagnostics and Enter/blur sanitising on the time axis
  (duplicates removed, ascending order).
- **Debounced sync.** Editor and store stay in step without feedback loops.
- **Drag editing.** Pointer drags create or stretch notes, with polyphony
  on or off.
- **Automatic rests.** Temporal gaps are filled with rests that carry the
  previous sounding note.

Drawing and audio are left to the host: the sequencer talks to a grid
host (cell lookup, container bounds) and a renderer (draws interval bars).

Minimal example:

    ```python
    import intervallic

    sequencer = intervallic.IntervalSequencer(grid_host, renderer)
    sequencer.set_pairs([intervallic.Pair(7, 0), intervallic.Pair(3, 4)])
    sequencer.intervals()
    ```

Package-level exports: ``BasePair``, ``Interval``, ``IntervalSequencer``,
``MatrixSequence``, ``Pair``, ``PairStore``, ``SequencerConfig``.
"""

import intervallic.config
import intervallic.controller
import intervallic.matrix
import intervallic.pair_store
import intervallic.pairs


BasePair = intervallic.pairs.BasePair
Interval = intervallic.pairs.Interval
IntervalSequencer = intervallic.controller.IntervalSequencer
MatrixSequence = intervallic.matrix.MatrixSequence
Pair = intervallic.pairs.Pair
PairStore = intervallic.pair_store.PairStore
SequencerConfig = intervallic.config.SequencerConfig
