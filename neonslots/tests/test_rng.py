import pytest

from neonslots.utils.rng import RandomSource, SeededRandomSource, SystemRandomSource


def test_seeded_source_is_reproducible():
    first = SeededRandomSource(42)
    second = SeededRandomSource(42)
    assert [first.next_int(100) for _ in range(50)] == [second.next_int(100) for _ in range(50)]
    assert first.seed == 42


def test_next_int_stays_within_bound():
    for source in (SeededRandomSource(3), SystemRandomSource()):
        values = {source.next_int(7) for _ in range(500)}
        assert values <= set(range(7))


def test_next_float_in_unit_interval():
    source = SeededRandomSource(11)
    for _ in range(200):
        value = source.next_float()
        assert 0.0 <= value < 1.0


@pytest.mark.parametrize("bound", [0, -3])
def test_non_positive_bound_rejected(bound):
    with pytest.raises(ValueError):
        SeededRandomSource(1).next_int(bound)


def test_base_source_is_abstract():
    with pytest.raises(NotImplementedError):
        RandomSource().next_int(5)
