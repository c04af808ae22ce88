import pytest

from mandelview.evaluator import (
    BOUND,
    BOUND_COUNT,
    Bound,
    Escaped,
    escape_count,
    evaluate,
    from_escape_count,
)


def test_far_point_escapes_on_first_update():
    assert evaluate(3 + 0j) == Escaped(0)


def test_one_plus_i_escapes_on_second_update():
    # |1+i| is below the radius; (1+i)^2 + (1+i) = 1+3i is not.
    assert evaluate(1 + 1j, 1000, 2.0) == Escaped(1)


@pytest.mark.parametrize("cap", [0, 1, 7, 1000])
def test_origin_is_bound_for_any_cap(cap):
    assert evaluate(0j, cap, 2.0) is BOUND


@pytest.mark.parametrize("c", [-1 + 0j, -0.5 + 0.25j, 0.25 + 0j, -0.1 + 0.1j])
def test_interior_points_are_bound(c):
    assert evaluate(c, 1000, 2.0) is BOUND


def test_radius_comparison_is_strict():
    # The orbit of -2 settles on 2, exactly the radius.
    assert evaluate(-2 + 0j, 1000, 2.0) is BOUND


def test_escape_index_counts_completed_updates():
    # 0.5, 0.75, 1.0625, 1.6289..., 3.1533...
    assert evaluate(0.5 + 0j, 1000, 2.0) == Escaped(4)


def test_cap_limits_number_of_updates():
    assert evaluate(0.5 + 0j, 4, 2.0) is BOUND
    assert evaluate(0.5 + 0j, 5, 2.0) == Escaped(4)


def test_larger_radius_delays_escape():
    assert evaluate(3 + 0j, 1000, 10.0) == Escaped(1)


@pytest.mark.parametrize("c", [complex(1.5e308, 1.5e308), complex(-1.7e308, 1e308)])
def test_norm_overflow_counts_as_escape(c):
    assert evaluate(c, 1000, 2.0) == Escaped(0)


def test_bound_is_a_singleton_value():
    assert Bound() == BOUND
    assert isinstance(BOUND, Bound)


def test_escape_count_encoding():
    assert escape_count(Escaped(12)) == 12
    assert escape_count(BOUND) == BOUND_COUNT
    assert from_escape_count(BOUND_COUNT) is BOUND
    assert from_escape_count(3) == Escaped(3)
