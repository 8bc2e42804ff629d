"""Shared fixtures for detection tests.

Engines run against an in-memory snapshot provider, a recording sink and a
fixed clock, so every evaluation is deterministic.
"""
from __future__ import annotations

import pytest

from cpa_core import CollisionEngine, EngineConfig
from tests.fakes import NOW_MS, OWN_ID, OWN_POS, FakeSnapshotProvider, RecordingSink, snapshot


@pytest.fixture()
def provider() -> FakeSnapshotProvider:
    """Provider preloaded with our own vessel heading north at 10 kn."""
    return FakeSnapshotProvider({OWN_ID: snapshot(OWN_POS, course_deg=0, speed_kn=10)})


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def engine_factory(provider, sink):
    """Build a CollisionEngine with config overrides; clock pinned to NOW_MS."""

    def _factory(**overrides) -> CollisionEngine:
        return CollisionEngine(
            provider,
            sink,
            config=EngineConfig(**overrides),
            self_id=OWN_ID,
            clock=lambda: NOW_MS,
        )

    return _factory


@pytest.fixture()
def engine(engine_factory) -> CollisionEngine:
    return engine_factory()
