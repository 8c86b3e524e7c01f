"""Tests for IdentityProvisioner."""

from concurrent.futures import ThreadPoolExecutor

from sqlmodel import Session, func, select

from course_api.core import StorageError
from course_api.models import User
from course_api.services import GoogleProfile, IdentityProvisioner

ANA = GoogleProfile(
    provider_id="g-1001",
    name="Ana",
    email="ana@example.com",
    avatar_url="https://example.com/ana.png",
)


def _user_count(session: Session, google_id: str) -> int:
    return session.exec(
        select(func.count()).select_from(User).where(User.google_id == google_id)
    ).one()


class TestProvision:
    def test_creates_user_on_first_login(self, session):
        result = IdentityProvisioner(session).provision(ANA)

        assert result.ok
        user = result.unwrap()
        assert user.id is not None
        assert user.username == "Ana"
        assert user.email == "ana@example.com"
        assert user.google_id == "g-1001"
        assert user.avatar_url == "https://example.com/ana.png"

    def test_repeated_login_returns_same_user(self, session):
        provisioner = IdentityProvisioner(session)

        first = provisioner.provision(ANA).unwrap()
        second = provisioner.provision(ANA).unwrap()

        assert first.id == second.id
        assert _user_count(session, "g-1001") == 1

    def test_existing_user_is_not_overwritten(self, session):
        provisioner = IdentityProvisioner(session)
        original = provisioner.provision(ANA).unwrap()

        renamed = GoogleProfile(
            provider_id="g-1001", name="Ana Maria", email="other@example.com"
        )
        again = provisioner.provision(renamed).unwrap()

        assert again.id == original.id
        assert again.username == "Ana"
        assert again.email == "ana@example.com"

    def test_distinct_identities_get_distinct_users(self, session):
        provisioner = IdentityProvisioner(session)

        ana = provisioner.provision(ANA).unwrap()
        bo = provisioner.provision(GoogleProfile(provider_id="g-2002", name="Bo")).unwrap()

        assert ana.id != bo.id

    def test_storage_failure_is_reported(self, database):
        with Session(database.engine) as session:
            User.__table__.drop(database.engine)

            result = IdentityProvisioner(session).provision(ANA)

        assert not result.ok
        assert isinstance(result.error, StorageError)
        assert result.error.step == "provisioning"


def test_concurrent_first_logins_create_one_row(file_database):
    def login(_):
        with Session(file_database.engine) as session:
            return IdentityProvisioner(session).provision(ANA).unwrap().id

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(login, range(16)))

    assert len(set(ids)) == 1
    with Session(file_database.engine) as session:
        assert _user_count(session, "g-1001") == 1
