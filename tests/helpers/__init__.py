"""Test helpers for the tip triage tests.

Helpers:
    FakeTimeAuthority: Controllable clock for SLA and claim-expiry tests
    make_tip / make_profile / make_queue_item: domain object factories
    TriageHarness: services wired over stubs, with the stubs exposed

Usage:
    from tests.helpers import FakeTimeAuthority, make_tip
"""

from tests.helpers.factories import (
    CASE_ID,
    DEFAULT_CONTENT,
    T0,
    make_profile,
    make_queue_item,
    make_tip,
    make_verification,
)
from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.harness import TriageHarness, build_harness

__all__ = [
    "CASE_ID",
    "DEFAULT_CONTENT",
    "T0",
    "FakeTimeAuthority",
    "TriageHarness",
    "build_harness",
    "make_profile",
    "make_queue_item",
    "make_tip",
    "make_verification",
]
