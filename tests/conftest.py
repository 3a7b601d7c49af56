import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import sessionmaker

from tasklist.app import app, get_store
from tasklist.models import Base, TaskDB
from tasklist.store import TaskStore

TESTING_SQLITE_URL = "sqlite:///:memory:"
engine = create_engine(TESTING_SQLITE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Point the app at the in-memory database instead of SessionLocal
def override_get_store():
    return TaskStore(TestingSessionLocal)


app.dependency_overrides[get_store] = override_get_store


@pytest.fixture
def empty_db():
    Base.metadata.create_all(bind=engine)

    yield

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def setup(empty_db):
    db = TestingSessionLocal()
    db.add(TaskDB(title="Sample Task 1"))
    db.add(TaskDB(title="Sample Task 2", completed=True))
    db.add(TaskDB(title="Sample Task 3"))
    db.commit()
    db.close()


@pytest.fixture
def store(empty_db):
    return TaskStore(TestingSessionLocal)
