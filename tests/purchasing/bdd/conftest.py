"""Shared BDD fixtures and step definitions for the purchase flow."""

from datetime import timedelta

import pytest
from purchasing.flow.flow import COMMIT, PurchaseFlow
from purchasing.flow.processors.update_date import UpdateDateProcessor
from purchasing.security.login import LoginEventBridge
from pytest_bdd import given, parsers


@pytest.fixture()
def date_flow(statuses, clock):
    """Commit phase of the order flow, driven by the frozen clock."""
    return PurchaseFlow("order", {COMMIT: [UpdateDateProcessor(statuses, clock)]})


@pytest.fixture()
def login_bridge(clock):
    return LoginEventBridge(clock=clock)


@pytest.fixture()
def baseline():
    """Dates captured before the step under test, keyed by name."""
    return {}


@given(parsers.cfparse("time moves on by {hours:d} hours"))
def _(clock, hours):
    clock.advance(timedelta(hours=hours))
