"""Global settings service."""

import pytest

from groupcal.core.errors import InvalidRangeError
from groupcal.services.settings_service import get_max_future_weeks, get_settings, update_settings


def test_defaults_to_env_value(db_session):
    assert get_max_future_weeks(db_session) == 12
    assert get_settings(db_session) == {"max_future_weeks": 12}


def test_update_and_read_back(db_session):
    assert update_settings(db_session, 4) == {"max_future_weeks": 4}
    assert update_settings(db_session, 6) == {"max_future_weeks": 6}
    assert get_max_future_weeks(db_session) == 6


@pytest.mark.parametrize("value", [0, -3, "5", 2.5, None, True])
def test_rejects_non_positive_integers(db_session, value):
    with pytest.raises(InvalidRangeError):
        update_settings(db_session, value)
