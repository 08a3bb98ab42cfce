"""Shared fixtures for the promotion platform test suite."""

import pytest

from tests.factories import (
    make_application,
    make_downloadable_coupon,
    make_point_promotion,
    make_reward_coupon,
)


@pytest.fixture
def point_promotion():
    return make_point_promotion()


@pytest.fixture
def downloadable_coupon():
    return make_downloadable_coupon()


@pytest.fixture
def reward_coupon():
    return make_reward_coupon()


@pytest.fixture
def application():
    return make_application()
