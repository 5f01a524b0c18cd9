"""Shared test fixtures."""
import os

# Module-level engine must not need a Postgres driver during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

from datetime import date, datetime, time

import pytest
from sqlalchemy.orm import sessionmaker

from barberbook.config.database import build_engine, create_tables
from barberbook.models import Service, Staff, WorkHourRule, BreakRule
from barberbook.schemas.booking import CustomerInfo

# Fixed Monday; services take `now` explicitly in tests
MONDAY = date(2026, 3, 2)
NOW = datetime(2026, 3, 1, 8, 0)


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so separate sessions see each other's commits."""
    engine = build_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def staff(db):
    """Barber working Monday 09:00-12:00 and Tuesday 09:00-17:00 with lunch."""
    member = Staff(name="João Barbeiro", slug="joao", is_active=True)
    db.add(member)
    db.flush()
    db.add_all([
        WorkHourRule(staff_id=member.id, weekday=0, start_time=time(9, 0), end_time=time(12, 0)),
        WorkHourRule(staff_id=member.id, weekday=1, start_time=time(9, 0), end_time=time(17, 0)),
        BreakRule(staff_id=member.id, weekday=1, start_time=time(12, 0), end_time=time(13, 0)),
    ])
    db.commit()
    db.refresh(member)
    return member


@pytest.fixture
def haircut(db):
    service = Service(name="Corte", price=45, duration_minutes=30, is_active=True)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def long_service(db):
    service = Service(name="Corte + Barba", price=70, duration_minutes=60, is_active=True)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def customer():
    return CustomerInfo(name="Maria Silva", phone="(11) 98765-4321")


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def now():
    """Shop-local clock the day before MONDAY."""
    return NOW
