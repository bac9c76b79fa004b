import pytest

import intervallic.pair_store

from intervallic.pairs import Pair


@pytest.fixture
def store_and_log () -> tuple:

	"""A store whose change notifications are recorded."""

	log: list = []
	store = intervallic.pair_store.PairStore(on_change=log.append)

	return store, log


def test_add_and_has (store_and_log: tuple) -> None:

	"""add() appends a pair, updates lookups and notifies once."""

	store, log = store_and_log

	assert store.add(3, 1) is True
	assert store.has(3, 1)
	assert not store.has(1, 3)
	assert store.pairs() == [Pair(3, 1)]
	assert log == [[Pair(3, 1)]]


def test_add_duplicate_is_refused (store_and_log: tuple) -> None:

	"""Adding an existing cell returns False and does not notify."""

	store, log = store_and_log
	store.add(3, 1)

	assert store.add(3, 1) is False
	assert len(log) == 1


def test_order_is_preserved () -> None:

	"""Pairs keep insertion order rather than being sorted."""

	store = intervallic.pair_store.PairStore()
	store.add(5, 4)
	store.add(2, 0)
	store.add(9, 2)

	assert store.notes() == [5, 2, 9]
	assert store.pulses() == [4, 0, 2]
	assert len(store) == 3


def test_remove (store_and_log: tuple) -> None:

	"""remove() drops the pair and clears its memory cell."""

	store, log = store_and_log
	store.add(3, 1)
	store.add(4, 2)

	assert store.remove(3, 1) is True
	assert store.pairs() == [Pair(4, 2)]
	assert store.get_memory(3, 1) is False
	assert store.remove(3, 1) is False
	assert len(log) == 3


def test_set_pairs_is_atomic (store_and_log: tuple) -> None:

	"""set_pairs() replaces everything with a single notification."""

	store, log = store_and_log
	store.add(0, 0)
	log.clear()

	store.set_pairs([Pair(1, 0, 2), Pair(2, 2)])

	assert store.pairs() == [Pair(1, 0, 2), Pair(2, 2)]
	assert not store.has(0, 0)
	assert store.has(1, 0)
	assert log == [[Pair(1, 0, 2), Pair(2, 2)]]


def test_returned_list_is_a_copy () -> None:

	"""Mutating the returned list does not touch the store."""

	store = intervallic.pair_store.PairStore()
	store.add(1, 1)

	pairs = store.pairs()
	pairs.append(Pair(2, 2))

	assert store.count() == 1


def test_clear (store_and_log: tuple) -> None:

	"""clear() empties the list and the memory grid."""

	store, log = store_and_log
	store.add(1, 1)
	store.clear()

	assert store.pairs() == []
	assert store.memory_pairs() == []
	assert log[-1] == []


def test_ensure_memory_pads_without_overwriting () -> None:

	"""ensure_memory() adds False cells and leaves True ones alone."""

	store = intervallic.pair_store.PairStore()
	store.set_memory(2, 3, True)
	store.ensure_memory(4, 5)

	assert store.get_memory(2, 3) is True
	assert store.get_memory(4, 5) is False
	assert store.memory_pairs() == [Pair(2, 3)]


def test_rests_do_not_switch_memory_on () -> None:

	"""Only sounding pairs mark memory cells."""

	store = intervallic.pair_store.PairStore()
	store.set_pairs([Pair(3, 0), Pair(3, 1, 2, is_rest=True)])

	assert store.get_memory(3, 0) is True
	assert store.get_memory(3, 1) is False


def test_memory_survives_shrink_and_grow () -> None:

	"""Cells beyond a shrunk grid come back when it grows again."""

	store = intervallic.pair_store.PairStore(note_range=(0, 11), pulse_range=(0, 7))
	store.set_pairs([Pair(1, 0), Pair(2, 6), Pair(3, 7)])

	store.resize(11, 3)

	assert store.pairs() == [Pair(1, 0)]
	assert store.get_memory(2, 6) is True

	store.set_pairs([Pair(1, 0), Pair(4, 2)])
	store.resize(11, 7)

	assert store.pairs() == [Pair(1, 0), Pair(4, 2), Pair(2, 6), Pair(3, 7)]


def test_set_pairs_only_rewrites_memory_inside_bounds () -> None:

	"""Replacing the list forgets removed cells inside the grid but not outside it."""

	store = intervallic.pair_store.PairStore(pulse_range=(0, 3))
	store.set_memory(0, 6, True)
	store.set_pairs([Pair(1, 1)])
	store.set_pairs([Pair(2, 2)])

	assert store.get_memory(1, 1) is False
	assert store.get_memory(2, 2) is True
	assert store.get_memory(0, 6) is True


def test_unsubscribe () -> None:

	"""The function returned by on_change() stops notifications."""

	store = intervallic.pair_store.PairStore()
	log: list = []

	unsubscribe = store.on_change(log.append)
	store.add(0, 0)
	unsubscribe()
	store.add(1, 1)

	assert len(log) == 1
