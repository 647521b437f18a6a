import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


# =============================================================================
# Service fixtures
# =============================================================================

@pytest.fixture
def triangle_services():
    """A -> B -> C -> A plus an isolated D."""
    return [
        {"id": "A", "name": "Auth", "category": "security", "depends_on": ["B"]},
        {"id": "B", "name": "Billing", "category": "payments", "depends_on": ["C"]},
        {"id": "C", "name": "Catalog", "category": "commerce", "depends_on": ["A"]},
        {"id": "D", "name": "Docs", "category": "content", "depends_on": []},
    ]


def star(leaves: int):
    """Hub H with `leaves` services depending on it."""
    services = [{"id": "H", "name": "Hub", "depends_on": []}]
    for i in range(leaves):
        services.append({"id": f"L{i}", "name": f"Leaf {i}", "depends_on": ["H"]})
    return services


@pytest.fixture
def star_services():
    return star


# =============================================================================
# Database fixtures
# =============================================================================

@pytest.fixture
def db_session_factory():
    from app.db.models import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    yield factory
    engine.dispose()
