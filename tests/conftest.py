"""
Shared fixtures.

The bundled seed is used as the reference snapshot. Its key figures:
- students STU001-STU006; STU004 and STU005 pending, STU006 rejected
- instructors INS001-INS005; INS004 and INS005 pending
- INS001 owes 320.0 (pending TXN005), INS002 owes 180.5 (pending TXN006)
- conversations CONV001 (unread, 2), CONV002 (read), CONV003 (resolved)
- packages PKG001 approved, PKG002/PKG003 pending, PKG004 rejected
"""

from datetime import date, datetime

import pytest

from admin_console.seed import load_seed
from admin_console.store.store import AdminStore


TODAY = date(2025, 3, 14)
NOW = datetime(2025, 3, 14, 10, 30, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def today():
    return TODAY


@pytest.fixture(scope="session")
def seed_state():
    """Bundled seed snapshot."""
    return load_seed(today=TODAY)


@pytest.fixture
def state(seed_state):
    return seed_state


@pytest.fixture
def store(seed_state):
    """Store over the seed with a fixed clock and no validator."""
    return AdminStore(seed_state, clock=lambda: NOW)
