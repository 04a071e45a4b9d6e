import os

# keep the module-level engine away from the working directory's database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PROMOTION_SWEEP_ENABLED", "0")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eats.db.session import Base, create_db, import_models
from eats.models.dish import Dish
from eats.models.restaurant import Restaurant
from eats.models.user import User, UserRole
from eats.services.auth import create_access_token, get_password_hash
from eats.services.restaurants import get_or_create_category

# register every mapper before tests build transient model instances
import_models()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
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
def make_user(db):
    counter = {"n": 0}

    def _make(role=UserRole.Client, email=None, password="secret123"):
        counter["n"] += 1
        user = User(
            email=email or f"{role.value.lower()}{counter['n']}@example.com",
            password=get_password_hash(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_restaurant(db):
    def _make(owner, name="Pizza Place", category="Pizza"):
        restaurant = Restaurant(name=name, address="1 Main St", owner_id=owner.id)
        restaurant.category = get_or_create_category(db, category)
        db.add(restaurant)
        db.commit()
        db.refresh(restaurant)
        return restaurant

    return _make


@pytest.fixture
def make_dish(db):
    def _make(restaurant, name="Margherita", price=100, options=None):
        dish = Dish(name=name, price=price, description="tasty dish", restaurant_id=restaurant.id,
                    options=options)
        db.add(dish)
        db.commit()
        db.refresh(dish)
        return dish

    return _make


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient

    from eats.db.session import get_db
    from eats.main import app
    from eats.services.mail import get_mail_service
    from eats.utils.pubsub import PubSub

    class _NullMail:
        def send_verification_email(self, email, code):
            pass

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_mail_service] = _NullMail
    app.state.pubsub = PubSub()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
