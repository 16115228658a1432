import math

import pytest

from alsa_tlv.calculation import (
    container_val_from_db,
    container_val_to_db,
    entry_val_to_db,
    interval_val_from_db,
    interval_val_to_db,
    range_val_from_db,
    range_val_to_db,
    scale_val_from_db,
    scale_val_to_db,
    val_from_db,
    val_from_linear_for_db,
    val_to_db,
    val_to_linear_for_db,
)
from alsa_tlv.constants import CTL_VALUE_MUTE
from alsa_tlv.domain.errors import DbCalculationError, ErrorCause, ErrorTarget
from alsa_tlv.domain.models import (
    Chmap,
    Container,
    DbInterval,
    DbRange,
    DbRangeEntry,
    DbScale,
    ValueRange,
)


def test_db_scale_conversion(negative_range):
    scale = DbScale(min=1, step=100, mute_avail=False)

    assert scale_val_to_db(scale, -10, negative_range) == 0.01
    assert scale_val_to_db(scale, 0, negative_range) == 10.01
    assert scale_val_to_db(scale, -5, negative_range) == pytest.approx(5.01)

    assert scale_val_from_db(scale, 0.01, negative_range) == -10
    assert scale_val_from_db(scale, 10.01, negative_range) == 0
    assert scale_val_from_db(scale, 5.01, negative_range) == -5


def test_db_interval_matches_equivalent_scale(negative_range):
    interval = DbInterval(min=1, max=1001, linear=False, mute_avail=False)

    assert interval_val_to_db(interval, -10, negative_range) == 0.01
    assert interval_val_to_db(interval, 0, negative_range) == 10.01
    assert interval_val_to_db(interval, -5, negative_range) == pytest.approx(5.01)

    assert interval_val_from_db(interval, 0.01, negative_range) == -10
    assert interval_val_from_db(interval, 10.01, negative_range) == 0
    assert interval_val_from_db(interval, 5.01, negative_range) == -5


def test_amplitude_linear_interval():
    interval = DbInterval(min=2000, max=6000, linear=True, mute_avail=True)
    value_range = ValueRange(min=33, max=133, step=1)

    assert val_to_linear_for_db(interval, CTL_VALUE_MUTE, value_range) == -math.inf
    assert val_to_linear_for_db(interval, 33, value_range) == 20.0
    assert val_to_linear_for_db(interval, 133, value_range) == 60.0

    assert val_from_linear_for_db(interval, 20.0, value_range) == 33
    assert val_from_linear_for_db(interval, 60.0, value_range) == 133
    assert val_from_linear_for_db(interval, -math.inf, value_range) == CTL_VALUE_MUTE


def test_amplitude_linear_interior_follows_signal_level():
    interval = DbInterval(min=-2000, max=0, linear=True)
    value_range = ValueRange(min=0, max=90)

    # Linear amplitude 0.1 + 0.9 * 50 / 90 = 0.6.
    db = interval_val_to_db(interval, 50, value_range)

    assert db == pytest.approx(20.0 * math.log10(0.6))
    assert interval_val_from_db(interval, db, value_range) == pytest.approx(50, abs=1)


def test_boundaries_return_interval_bounds_exactly():
    interval = DbInterval(min=-12345, max=678, linear=False)
    value_range = ValueRange(min=7, max=1029)

    assert interval_val_to_db(interval, 7, value_range) == interval.min_f()
    assert interval_val_to_db(interval, 1029, value_range) == interval.max_f()


def test_mute_requires_mute_availability():
    value_range = ValueRange(min=0, max=10)
    muted = DbInterval(min=-1000, max=0, mute_avail=True)
    unmuted = DbInterval(min=-1000, max=0, mute_avail=False)

    assert interval_val_to_db(muted, CTL_VALUE_MUTE, value_range) == -math.inf
    assert interval_val_from_db(muted, -math.inf, value_range) == CTL_VALUE_MUTE

    with pytest.raises(DbCalculationError) as exc_info:
        interval_val_to_db(unmuted, CTL_VALUE_MUTE, value_range)
    assert exc_info.value.cause is ErrorCause.OUT_OF_RANGE

    with pytest.raises(DbCalculationError) as exc_info:
        interval_val_from_db(unmuted, -math.inf, value_range)
    assert exc_info.value.cause is ErrorCause.OUT_OF_RANGE
    assert exc_info.value.message == "-inf is not supported for mute"


@pytest.mark.parametrize("val", [-1, 11, 2**31 - 1])
def test_values_outside_range_are_rejected(val):
    interval = DbInterval(min=0, max=1000)

    with pytest.raises(DbCalculationError) as exc_info:
        interval_val_to_db(interval, val, ValueRange(min=0, max=10))

    assert exc_info.value.target is ErrorTarget.DB_INTERVAL
    assert exc_info.value.cause is ErrorCause.OUT_OF_RANGE
    assert exc_info.value.message == f"{val} is not between 0 and 10"


@pytest.mark.parametrize("db", [-0.01, 10.01, math.inf, math.nan])
def test_db_outside_interval_is_rejected(db):
    interval = DbInterval(min=0, max=1000)

    with pytest.raises(DbCalculationError) as exc_info:
        interval_val_from_db(interval, db, ValueRange(min=0, max=10))

    assert exc_info.value.cause is ErrorCause.OUT_OF_RANGE


def test_from_db_truncates_toward_zero():
    interval = DbInterval(min=0, max=1000, linear=False)

    # Exact results are 2.56 and -7.56; rounding would give 3 and -8.
    assert interval_val_from_db(interval, 2.56, ValueRange(min=0, max=10)) == 2
    assert interval_val_from_db(interval, 2.44, ValueRange(min=-10, max=0)) == -7


def test_zero_length_range_uses_boundaries():
    interval = DbInterval(min=-600, max=-600)
    value_range = ValueRange(min=4, max=4)

    assert interval_val_to_db(interval, 4, value_range) == -6.0
    assert interval_val_from_db(interval, -6.0, value_range) == 4


def test_range_entry_uses_sub_range():
    entry = DbRangeEntry(min_val=0, max_val=10, data=DbScale(min=0, step=100))

    assert entry_val_to_db(entry, 5, ValueRange(min=0, max=100)) == 5.0


def test_nested_dbrange_search(negative_range, split_dbrange):
    assert range_val_to_db(split_dbrange, CTL_VALUE_MUTE, negative_range) == -math.inf
    assert range_val_to_db(split_dbrange, -10, negative_range) == 0.01
    assert range_val_to_db(split_dbrange, -5, negative_range) == 5.01
    assert range_val_to_db(split_dbrange, 0, negative_range) == 10.01

    assert range_val_from_db(split_dbrange, -math.inf, negative_range) == CTL_VALUE_MUTE
    assert range_val_from_db(split_dbrange, 0.01, negative_range) == -10
    assert range_val_from_db(split_dbrange, 5.01, negative_range) == -5
    assert range_val_from_db(split_dbrange, 10.01, negative_range) == 0


def test_top_level_dbrange_collapses_to_hull(negative_range, split_dbrange):
    assert val_to_db(split_dbrange, CTL_VALUE_MUTE, negative_range) == -math.inf
    assert val_to_db(split_dbrange, -10, negative_range) == 0.01
    assert val_to_db(split_dbrange, -5, negative_range) == pytest.approx(5.01)
    assert val_to_db(split_dbrange, 0, negative_range) == 10.01

    assert val_from_db(split_dbrange, -math.inf, negative_range) == CTL_VALUE_MUTE
    assert val_from_db(split_dbrange, 0.01, negative_range) == -10
    assert val_from_db(split_dbrange, 5.01, negative_range) == -5
    assert val_from_db(split_dbrange, 10.01, negative_range) == 0


def test_first_declared_entry_wins_on_shared_boundary(negative_range):
    dbrange = DbRange(
        entries=(
            DbRangeEntry(-10, -5, DbInterval(min=1, max=501)),
            DbRangeEntry(-5, 0, DbInterval(min=2000, max=3000)),
        )
    )

    assert range_val_to_db(dbrange, -5, negative_range) == 5.01


def test_mute_search_prefers_later_entry_on_tie():
    dbrange = DbRange(
        entries=(
            DbRangeEntry(0, 5, DbInterval(min=0, max=100, mute_avail=False)),
            DbRangeEntry(5, 10, DbInterval(min=0, max=200, mute_avail=True)),
        )
    )
    value_range = ValueRange(min=0, max=10)

    assert range_val_to_db(dbrange, CTL_VALUE_MUTE, value_range) == -math.inf
    assert range_val_from_db(dbrange, -math.inf, value_range) == CTL_VALUE_MUTE


def test_dbrange_without_matching_entry(negative_range, split_dbrange):
    with pytest.raises(DbCalculationError) as exc_info:
        range_val_to_db(split_dbrange, 1, negative_range)

    assert exc_info.value.target is ErrorTarget.DB_RANGE
    assert exc_info.value.cause is ErrorCause.NO_ENTRY_AVAIL

    with pytest.raises(DbCalculationError) as exc_info:
        range_val_from_db(split_dbrange, 20.0, negative_range)

    assert exc_info.value.cause is ErrorCause.NO_ENTRY_AVAIL


def test_dbrange_wraps_nested_failure():
    dbrange = DbRange(entries=(DbRangeEntry(0, 10, DbInterval(min=0, max=100, mute_avail=False)),))

    with pytest.raises(DbCalculationError) as exc_info:
        range_val_to_db(dbrange, CTL_VALUE_MUTE, ValueRange(min=0, max=10))

    error = exc_info.value
    assert error.target is ErrorTarget.DB_RANGE
    assert error.cause is ErrorCause.CALCULATION_FAILED
    assert error.message.startswith("-9999999 is not between 0 and 10: DbRangeEntry(")


def test_nested_dbrange_inside_entry():
    inner = DbRange(
        entries=(
            DbRangeEntry(0, 5, DbInterval(min=-1000, max=-500)),
            DbRangeEntry(5, 10, DbInterval(min=-500, max=0)),
        )
    )
    outer = DbRange(entries=(DbRangeEntry(0, 10, inner),))
    value_range = ValueRange(min=0, max=10)

    assert range_val_to_db(outer, 5, value_range) == -5.0
    assert range_val_to_db(outer, 10, value_range) == 0.0
    assert range_val_from_db(outer, -10.0, value_range) == 0


def test_container_search_skips_entries_without_db():
    container = Container(entries=(Chmap(), DbScale(min=0, step=10)))
    value_range = ValueRange(min=0, max=10)

    assert container_val_to_db(container, 5, value_range) == 0.5
    assert container_val_from_db(container, 1.0, value_range) == 10


def test_container_without_candidates_reports_dbrange_target():
    container = Container(entries=(Chmap(),))
    value_range = ValueRange(min=0, max=10)

    with pytest.raises(DbCalculationError) as exc_info:
        container_val_to_db(container, 5, value_range)
    assert exc_info.value.target is ErrorTarget.DB_RANGE
    assert exc_info.value.cause is ErrorCause.NO_ENTRY_AVAIL

    with pytest.raises(DbCalculationError) as exc_info:
        container_val_from_db(container, 0.0, value_range)
    assert exc_info.value.target is ErrorTarget.DB_RANGE
    assert exc_info.value.cause is ErrorCause.NO_ENTRY_AVAIL


def test_container_failure_targets():
    container = Container(entries=(DbInterval(min=0, max=100, mute_avail=False),))
    value_range = ValueRange(min=0, max=10)

    with pytest.raises(DbCalculationError) as exc_info:
        container_val_to_db(container, CTL_VALUE_MUTE, value_range)
    assert exc_info.value.target is ErrorTarget.CONTAINER
    assert exc_info.value.cause is ErrorCause.CALCULATION_FAILED

    with pytest.raises(DbCalculationError) as exc_info:
        container_val_from_db(container, -math.inf, value_range)
    assert exc_info.value.target is ErrorTarget.DB_RANGE
    assert exc_info.value.cause is ErrorCause.CALCULATION_FAILED


def test_top_level_channel_map_has_no_db():
    with pytest.raises(DbCalculationError) as exc_info:
        val_to_db(Chmap(), 0, ValueRange(min=0, max=1))

    assert exc_info.value.target is ErrorTarget.CHMAP
    assert exc_info.value.cause is ErrorCause.TO_DB_INTERVAL


def test_top_level_container_with_channel_map_fails_to_reduce():
    container = Container(entries=(DbScale(min=0, step=10), Chmap()))

    with pytest.raises(DbCalculationError) as exc_info:
        val_from_db(container, 0.0, ValueRange(min=0, max=10))

    assert exc_info.value.target is ErrorTarget.CONTAINER
    assert exc_info.value.cause is ErrorCause.TO_DB_INTERVAL
    assert "Container(entries=" in exc_info.value.message


def test_top_level_scale_uses_outer_range():
    scale = DbScale(min=-6000, step=100, mute_avail=True)
    value_range = ValueRange(min=0, max=60)

    assert val_to_db(scale, 30, value_range) == -30.0
    assert val_to_db(scale, CTL_VALUE_MUTE, value_range) == -math.inf
    assert val_from_db(scale, -30.0, value_range) == 30


def test_amplitude_linear_saturates_on_huge_bounds():
    interval = DbInterval(min=0, max=700000, linear=True)
    value_range = ValueRange(min=0, max=10)

    assert val_to_db(interval, 5, value_range) == math.inf
    assert val_to_db(interval, 10, value_range) == 7000.0
    assert val_from_db(interval, 10.0, value_range) == 0

    with pytest.raises(DbCalculationError) as exc_info:
        val_from_db(interval, 6500.0, value_range)
    assert exc_info.value.target is ErrorTarget.DB_INTERVAL
    assert exc_info.value.cause is ErrorCause.OUT_OF_RANGE


def test_amplitude_linear_underflow_maps_to_negative_infinity():
    interval = DbInterval(min=-9999999, max=-9000000, linear=True)
    value_range = ValueRange(min=0, max=10)

    assert val_to_db(interval, 5, value_range) == -math.inf

    with pytest.raises(DbCalculationError) as exc_info:
        val_from_db(interval, -95000.0, value_range)
    assert exc_info.value.cause is ErrorCause.OUT_OF_RANGE


def test_amplitude_linear_without_finite_amplitude_is_rejected():
    interval = DbInterval(min=700000, max=800000, linear=True)

    with pytest.raises(DbCalculationError) as exc_info:
        val_to_db(interval, 5, ValueRange(min=0, max=10))

    assert exc_info.value.cause is ErrorCause.OUT_OF_RANGE
    assert exc_info.value.message == "5 has no dB value between 7000.0 and 8000.0"


def _single_entry_range(min_val: int, max_val: int, interval: DbInterval) -> DbRange:
    return DbRange(entries=(DbRangeEntry(min_val, max_val, interval),))


def test_container_mute_selects_quietest_entry():
    container = Container(
        entries=(
            _single_entry_range(0, 10, DbInterval(min=-2000, max=-1000, mute_avail=False)),
            _single_entry_range(10, 20, DbInterval(min=-3000, max=-2000, mute_avail=True)),
        )
    )
    value_range = ValueRange(min=0, max=20)

    assert container_val_to_db(container, CTL_VALUE_MUTE, value_range) == -math.inf
    assert container_val_from_db(container, -math.inf, value_range) == CTL_VALUE_MUTE


def test_container_mute_prefers_later_entry_on_tie():
    container = Container(
        entries=(
            _single_entry_range(0, 10, DbInterval(min=-3000, max=-1000, mute_avail=False)),
            _single_entry_range(10, 20, DbInterval(min=-3000, max=-2000, mute_avail=True)),
        )
    )
    value_range = ValueRange(min=0, max=20)

    assert container_val_to_db(container, CTL_VALUE_MUTE, value_range) == -math.inf
    assert container_val_from_db(container, -math.inf, value_range) == CTL_VALUE_MUTE


def test_container_first_entry_wins_on_shared_raw_boundary():
    container = Container(
        entries=(
            _single_entry_range(0, 10, DbInterval(min=-2000, max=-1000)),
            _single_entry_range(10, 20, DbInterval(min=500, max=1000)),
        )
    )
    value_range = ValueRange(min=0, max=20)

    assert container_val_to_db(container, 10, value_range) == -10.0
    assert container_val_to_db(container, 20, value_range) == 10.0


def test_container_first_entry_wins_on_shared_db_boundary():
    container = Container(
        entries=(
            _single_entry_range(0, 10, DbInterval(min=-2000, max=-1000)),
            _single_entry_range(20, 30, DbInterval(min=-1000, max=0)),
        )
    )
    value_range = ValueRange(min=0, max=30)

    assert container_val_from_db(container, -10.0, value_range) == 10
    assert container_val_from_db(container, 0.0, value_range) == 30


def test_container_mute_candidates_depend_on_direction():
    # The first entry spans beyond the outer range, so it only reduces over
    # its own sub-range.
    container = Container(
        entries=(
            _single_entry_range(0, 30, DbInterval(min=-3000, max=0, mute_avail=True)),
            _single_entry_range(0, 20, DbInterval(min=-2000, max=0, mute_avail=False)),
        )
    )
    value_range = ValueRange(min=0, max=20)

    assert container_val_to_db(container, CTL_VALUE_MUTE, value_range) == -math.inf

    with pytest.raises(DbCalculationError) as exc_info:
        container_val_from_db(container, -math.inf, value_range)
    assert exc_info.value.target is ErrorTarget.DB_RANGE
    assert exc_info.value.cause is ErrorCause.CALCULATION_FAILED
    assert exc_info.value.message.startswith("-inf is not supported for mute: ")
