"""Tests for admin accounts, tokens and the transaction helper."""

import jwt
import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from league_api.core.config import settings
from league_api.core.errors import AuthenticationError, InvalidInputError, InvalidStateError
from league_api.core.security import create_access_token, decode_access_token, verify_password
from league_api.data.database import transaction
from league_api.data.models import Admin, Team
from league_api.services.admins import AdminService


class TestAdmin:
    def test_register_hashes_password(self, db):
        admin = AdminService(db).register("Boss", "Boss@League.test ", "long-enough")

        assert admin.email == "boss@league.test"
        assert admin.password_hash != "long-enough"
        assert verify_password("long-enough", admin.password_hash)

    def test_only_one_admin(self, db):
        service = AdminService(db)
        service.register("Boss", "boss@league.test", "long-enough")

        with pytest.raises(InvalidStateError):
            service.register("Other", "other@league.test", "long-enough")

        assert db.scalar(select(func.count(Admin.id))) == 1

    def test_singleton_column_blocks_second_row(self, db):
        db.add(Admin(name="One", email="one@league.test", password_hash="x"))
        db.commit()

        with pytest.raises(IntegrityError):
            with transaction(db):
                db.add(Admin(name="Two", email="two@league.test", password_hash="y"))

    def test_short_password(self, db):
        with pytest.raises(InvalidInputError):
            AdminService(db).register("Boss", "boss@league.test", "short")

    def test_password_over_bcrypt_limit(self, db):
        # 37 two-byte characters: short in characters, 74 bytes encoded
        with pytest.raises(InvalidInputError):
            AdminService(db).register("Boss", "boss@league.test", "\u00e9" * 37)

        assert db.scalar(select(func.count(Admin.id))) == 0

    def test_password_at_bcrypt_limit(self, db):
        admin = AdminService(db).register("Boss", "boss@league.test", "x" * 72)

        assert verify_password("x" * 72, admin.password_hash)

    def test_login_returns_token(self, db):
        service = AdminService(db)
        admin = service.register("Boss", "boss@league.test", "long-enough")

        token, logged_in = service.login("boss@league.test", "long-enough")

        assert logged_in.id == admin.id
        assert decode_access_token(token)["sub"] == str(admin.id)

    @pytest.mark.parametrize("email,password", [
        ("boss@league.test", "wrong-password"),
        ("nobody@league.test", "long-enough"),
        ("boss@league.test", "y" * 100),
    ])
    def test_login_rejects_bad_credentials(self, db, email, password):
        AdminService(db).register("Boss", "boss@league.test", "long-enough")

        with pytest.raises(AuthenticationError):
            AdminService(db).login(email, password)


class TestTokens:
    def test_tampered_token(self, db):
        admin = AdminService(db).register("Boss", "boss@league.test", "long-enough")
        token = create_access_token(admin)

        with pytest.raises(AuthenticationError):
            decode_access_token(token + "x")

    def test_expired_token(self):
        token = jwt.encode(
            {"sub": "1", "exp": 0}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(AuthenticationError, match="expired"):
            decode_access_token(token)


class TestTransaction:
    def test_commits_on_success(self, db):
        with transaction(db):
            db.add(Team(name="Committed"))

        db.expire_all()
        assert db.scalar(select(func.count(Team.id))) == 1

    def test_rolls_back_every_step_on_failure(self, db):
        with pytest.raises(RuntimeError):
            with transaction(db):
                db.add(Team(name="First"))
                db.flush()
                db.add(Team(name="Second"))
                db.flush()
                raise RuntimeError("boom")

        assert db.scalar(select(func.count(Team.id))) == 0
