"""Общие fixtures."""

import pytest

from taxledger.token import TaxToken

from tests.factories import ALICE, AUTHORITY, POOL, FakeVenue, make_config


@pytest.fixture
def venue() -> FakeVenue:
    return FakeVenue()


@pytest.fixture
def token(venue: FakeVenue) -> TaxToken:
    """Движок с раздачей: ALICE 100 000, POOL 200 000 (переводы authority без комиссии)."""
    token = TaxToken(make_config(), venue=venue)
    token.transfer(AUTHORITY, ALICE, 100_000)
    token.transfer(AUTHORITY, POOL, 200_000)
    return token
