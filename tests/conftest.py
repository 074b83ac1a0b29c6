import copy

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quizdrill.config import Settings
from quizdrill.database import get_db, init_db
from quizdrill.main import app
from quizdrill.models import User
from quizdrill.seed import ingest_questions, parse_questions

# Two-question bank: Q1 single-select {a}, Q2 multi-select {a, c}
SCENARIO_BANK = [
    {
        "id": "Q1",
        "questionText": "Which planet is known as the red planet?",
        "questionTextPl": "Która planeta jest nazywana czerwoną planetą?",
        "multiSelect": False,
        "tags": "Core",
        "options": [
            {"id": "A", "text": "Mars", "textPl": "Mars"},
            {"id": "B", "text": "Venus"},
            {"id": "C", "text": "Jupiter"},
            {"id": "D", "text": "Mercury"},
        ],
        "correctOptionIds": ["A"],
        "optionsExplanation": {
            "en": [
                {"id": "a", "text": "Iron oxide gives Mars its colour.", "url": " https://example.com/mars "},
                {"id": "c", "text": "Jupiter is a gas giant."},
            ],
            "pl": [
                {"id": "a", "text": "Tlenek żelaza nadaje Marsowi kolor."},
            ],
        },
    },
    {
        "id": "Q2",
        "questionText": "Which of these are prime numbers?",
        "multiSelect": True,
        "tags": "Core, Multi, Core",
        "options": [
            {"id": "a", "text": "2"},
            {"id": "b", "text": "4"},
            {"id": "c", "text": "7"},
            {"id": "d", "text": "9"},
        ],
        "correctOptionIds": ["a", "c"],
        "optionsExplanation": {
            "en": [{"id": "b", "text": "4 = 2 x 2"}],
        },
    },
]

# A question whose options carry no correctness flag
BROKEN_QUESTION = {
    "id": "BROKEN",
    "questionText": "Which option is right?",
    "multiSelect": False,
    "options": [{"id": "a", "text": "This one"}, {"id": "b", "text": "That one"}],
    "correctOptionIds": [],
}


@pytest.fixture
def test_settings():
    """Settings isolated from the environment"""
    return Settings(
        database_url="sqlite://",
        seed_on_startup=False,
        default_question_count=80,
        default_duration_seconds=10800,
        pass_threshold=61.0,
        explanation_languages=["en", "pl"],
    )

@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)

@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()

@pytest.fixture
def scenario_questions():
    """Raw JSON items of the scenario bank"""
    return copy.deepcopy(SCENARIO_BANK)

@pytest.fixture
def scenario_bank(db):
    """The db session with the two-question scenario bank ingested"""
    ingest_questions(db, parse_questions(SCENARIO_BANK))
    return db

@pytest.fixture
def broken_bank(db):
    ingest_questions(db, parse_questions([BROKEN_QUESTION]))
    return db

@pytest.fixture
def user(db):
    user = User(public_id="11111111-1111-1111-1111-111111111111")
    db.add(user)
    db.commit()
    return user

@pytest.fixture
def other_user(db):
    user = User(public_id="22222222-2222-2222-2222-222222222222")
    db.add(user)
    db.commit()
    return user

@pytest.fixture
async def client(session_factory):
    """Create test client bound to the in-memory database"""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest.fixture
def identity_headers():
    """Helper to create identity headers"""
    def _identity_headers(public_id: str):
        return {"X-Public-Id": public_id}
    return _identity_headers
