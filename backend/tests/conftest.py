import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from storefront.api.deps import get_password_hasher, get_token_service
from storefront.auth import PasswordHasher, TokenService
from storefront.database import get_session
from storefront.main import app
from storefront.models.user import User

TEST_SECRET = "test-secret"


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    # Lowest bcrypt cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret=TEST_SECRET, expire_minutes=60)


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="session")
def session_fixture(engine, hasher: PasswordHasher):
    with Session(engine) as session:
        # Seed admin user
        admin = User(
            username="admin",
            password_hash=hasher.hash("admin"),
            role="admin",
        )
        session.add(admin)
        session.commit()
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session, hasher: PasswordHasher, tokens: TokenService):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_token_service] = lambda: tokens
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token(client: TestClient) -> str:
    response = client.post(
        "/login",
        json={"username": "admin", "password": "admin"},
    )
    return response.json()["token"]


@pytest.fixture
def user_token(client: TestClient) -> str:
    client.post(
        "/register",
        json={"username": "testuser", "password": "testpass"},
    )
    response = client.post(
        "/login",
        json={"username": "testuser", "password": "testpass"},
    )
    return response.json()["token"]
