"""
conftest.py — Shared pytest fixtures for the proposal service test suite.

Pricing, summary and report tests are pure unit tests.  Repository and
route tests run against an in-memory SQLite database (aiosqlite); no
PostgreSQL or external service is required.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``app.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import sys
import os
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
import pytest_asyncio

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any app imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Users (only role / company_id / email are read by the repository)
# ---------------------------------------------------------------------------

def make_user(role: str, email: str = "agent@acme.test", company_id: str = "acme", user_id: str = "u-1"):
    return SimpleNamespace(
        id=user_id,
        role=role,
        email=email,
        company_id=company_id,
        full_name="Test User",
        is_active=True,
    )


@pytest.fixture
def owner_user():
    return make_user("owner", email="owner@hq.test", company_id=None, user_id="u-owner")


@pytest.fixture
def admin_user():
    return make_user("admin", email="admin@acme.test", company_id="acme", user_id="u-admin")


@pytest.fixture
def agent_user():
    return make_user("agent", email="agent@acme.test", company_id="acme", user_id="u-agent")


# ---------------------------------------------------------------------------
# Sample proposal documents (camelCase, as stored)
# ---------------------------------------------------------------------------

def make_proposal_document(proposal_id: str = "prop-0001", **overrides) -> dict:
    """
    Two hotel options plus one of every shared item.

    Markups: hotels 10%, meetings fixed 50/unit/day, flights fixed 100/seat,
    transport 20%, activities 0, custom 5%.  VAT 15%.
    """
    doc = {
        "id": proposal_id,
        "proposalName": "Riyadh Leadership Summit",
        "customerName": "Acme Corp",
        "companyId": "acme",
        "createdBy": "agent@acme.test",
        "branding": {"contactName": "Sara Ali", "contactEmail": "sara@agency.test"},
        "pricing": {
            "currency": "SAR",
            "vatPercent": 15,
            "showPrices": True,
            "markups": {
                "hotels": {"type": "percentage", "value": 10},
                "meetings": {"type": "fixed", "value": 50},
                "flights": {"type": "fixed", "value": 100},
                "transportation": {"type": "percentage", "value": 20},
                "activities": {"type": "percentage", "value": 0},
                "customItems": {"type": "percentage", "value": 5},
            },
        },
        "hotelOptions": [
            {
                "name": "Grand Palace",
                "location": "Riyadh",
                "vatRule": "domestic",
                "roomTypes": [
                    {"name": "Deluxe", "checkIn": "2025-03-01", "checkOut": "2025-03-04",
                     "netPrice": 100, "numNights": 3, "quantity": 2, "includeInSummary": True},
                ],
                "meetingRooms": [
                    {"name": "Ballroom", "price": 1000, "days": 1, "quantity": 1, "includeInSummary": True},
                ],
                "dining": [
                    {"name": "Gala Dinner", "price": 200, "days": 1, "quantity": 10, "includeInSummary": True},
                ],
            },
            {
                "name": "Desert Rose",
                "location": "Riyadh",
                "vatRule": "domestic",
                "roomTypes": [
                    {"name": "Standard", "netPrice": 80, "numNights": 3, "quantity": 2},
                ],
            },
        ],
        "flightOptions": [
            {
                "routeDescription": "JED - RUH",
                "outbound": [{"airline": "Saudia", "flightNumber": "SV1020", "from": "JED", "to": "RUH"}],
                "return": [{"airline": "Saudia", "flightNumber": "SV1021", "from": "RUH", "to": "JED"}],
                "quotes": [
                    {"class": "Economy", "price": 500, "quantity": 10},
                    {"class": "Business", "price": 1500, "quantity": 2},
                ],
                "vatRule": "international",
                "includeInSummary": True,
            },
        ],
        "transportation": [
            {"type": "Bus", "model": "Coach 50", "netPricePerDay": 1000, "quantity": 1, "days": 2},
        ],
        "activities": [
            {"name": "Desert Safari", "pricePerPerson": 300, "guests": 10, "days": 1},
        ],
        "customItems": [
            {"description": "Welcome Kits", "unitPrice": 40, "quantity": 10, "days": 1},
        ],
        "inclusions": {
            "hotels": True, "flights": True, "transportation": True,
            "activities": True, "customItems": True,
        },
        "createdAt": "2025-01-10T08:00:00+00:00",
        "lastModified": "2025-01-12T08:00:00+00:00",
        "isDeleted": False,
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def proposal_document():
    return make_proposal_document()


@pytest.fixture
def sample_proposal(proposal_document):
    from app.models.proposal_schema import ProposalData
    return ProposalData.model_validate(proposal_document)


# ---------------------------------------------------------------------------
# In-memory database
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def session_factory():
    """
    async_sessionmaker bound to a fresh in-memory SQLite database.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool
    from app.db import Base
    from app.models import orm_models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def utc():
    return lambda *args: datetime(*args, tzinfo=timezone.utc)
