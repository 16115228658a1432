import pytest

from alsa_tlv.domain.models import DbInterval, DbRange, DbRangeEntry, ValueRange


@pytest.fixture
def negative_range():
    return ValueRange(min=-10, max=0, step=1)


@pytest.fixture
def split_dbrange():
    return DbRange(
        entries=(
            DbRangeEntry(
                min_val=-10,
                max_val=-5,
                data=DbInterval(min=1, max=501, linear=False, mute_avail=True),
            ),
            DbRangeEntry(
                min_val=-5,
                max_val=0,
                data=DbInterval(min=501, max=1001, linear=False, mute_avail=False),
            ),
        )
    )
