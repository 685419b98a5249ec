import pytest

from docshare.auth.dependencies import Identity
from docshare.database import Base, Database
from docshare.models.user import User


@pytest.fixture
def database():
    database = Database('sqlite://')
    database.create_schema()
    try:
        yield database
    finally:
        Base.metadata.drop_all(bind=database.engine)
        database.close()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make_user(email: str, role: str = 'teacher', full_name: str = 'Test User', password: str = 'secret1') -> User:
        user = User(email=email, password=password, full_name=full_name, role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


def identity_for(user: User) -> Identity:
    return Identity(id=user.id, email=user.email, role=user.role)


@pytest.fixture
def as_identity():
    return identity_for
