"""Service tests for the guess submission gate."""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models.base import Base
from app.models.listing import Listing
from app.models.price_guess import PriceGuess
from app.models.property import Property
from app.models.user import User
from app.services.errors import (
    CooldownActiveError,
    InvalidGuessError,
    PropertyNotFoundError,
    UnauthorizedError,
)
from app.services.guesses import as_utc, normalize_guessed_price, submit_guess

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
COOLDOWN = timedelta(days=5)


class GuessSubmissionTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self.db.execute(delete(PriceGuess))
        self.db.execute(delete(Listing))
        self.db.execute(delete(Property))
        self.db.execute(delete(User))
        self.db.commit()

        self.property = Property(address="Keizersgracht 1", city="Amsterdam", assessed_value=Decimal("400000"))
        self.unassessed = Property(address="Herengracht 2", city="Amsterdam", assessed_value=None)
        self.user = User(username="alice", display_name="Alice", karma=42)
        self.other_user = User(username="bob", karma=0)
        self.db.add_all([self.property, self.unassessed, self.user, self.other_user])
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()

    def _guess_count(self, property_id: int) -> int:
        return int(
            self.db.scalar(select(func.count(PriceGuess.id)).where(PriceGuess.property_id == property_id)) or 0
        )

    def test_first_submission_creates_guess(self) -> None:
        result = submit_guess(self.db, self.property.id, self.user.id, 425_000, now=T0)

        self.assertTrue(result.created)
        self.assertEqual(result.guess.guessed_price, Decimal("425000.00"))
        self.assertFalse(result.guess.is_outlier)
        self.assertEqual(as_utc(result.guess.created_at), T0)
        self.assertEqual(as_utc(result.guess.updated_at), T0)
        self.assertEqual(result.editable_at, T0 + COOLDOWN)
        self.assertEqual(self._guess_count(self.property.id), 1)

    def test_resubmission_inside_cooldown_fails_without_second_row(self) -> None:
        submit_guess(self.db, self.property.id, self.user.id, 425_000, now=T0)

        with self.assertRaises(CooldownActiveError) as ctx:
            submit_guess(self.db, self.property.id, self.user.id, 430_000, now=T0 + timedelta(days=4, hours=23))

        self.assertEqual(ctx.exception.cooldown_ends_at, T0 + COOLDOWN)
        self.assertEqual(self._guess_count(self.property.id), 1)
        stored = self.db.scalars(select(PriceGuess)).one()
        self.assertEqual(stored.guessed_price, Decimal("425000.00"))

    def test_resubmission_after_cooldown_updates_in_place(self) -> None:
        first = submit_guess(self.db, self.property.id, self.user.id, 425_000, now=T0)
        later = T0 + COOLDOWN

        second = submit_guess(self.db, self.property.id, self.user.id, 1, now=later)

        self.assertFalse(second.created)
        self.assertEqual(second.guess.id, first.guess.id)
        self.assertEqual(second.guess.guessed_price, Decimal("1.00"))
        self.assertTrue(second.guess.is_outlier)
        self.assertEqual(as_utc(second.guess.created_at), T0)
        self.assertEqual(as_utc(second.guess.updated_at), later)
        self.assertEqual(self._guess_count(self.property.id), 1)

    def test_cooldown_restarts_from_each_accepted_edit(self) -> None:
        submit_guess(self.db, self.property.id, self.user.id, 425_000, now=T0)
        edited_at = T0 + timedelta(days=6)
        submit_guess(self.db, self.property.id, self.user.id, 430_000, now=edited_at)

        with self.assertRaises(CooldownActiveError) as ctx:
            submit_guess(self.db, self.property.id, self.user.id, 435_000, now=edited_at + timedelta(days=1))
        self.assertEqual(ctx.exception.cooldown_ends_at, edited_at + COOLDOWN)

    def test_concurrent_first_submission_loses_to_existing_row(self) -> None:
        # Row committed by a competing request between this request's checks.
        self.db.add(
            PriceGuess(
                property_id=self.property.id,
                user_id=self.user.id,
                guessed_price=Decimal("410000"),
                is_outlier=False,
                created_at=T0,
                updated_at=T0,
            )
        )
        self.db.commit()

        with self.assertRaises(CooldownActiveError):
            submit_guess(self.db, self.property.id, self.user.id, 999_000, now=T0 + timedelta(seconds=1))
        self.assertEqual(self._guess_count(self.property.id), 1)

    def test_second_edit_from_another_session_hits_the_restarted_cooldown(self) -> None:
        submit_guess(self.db, self.property.id, self.user.id, 425_000, now=T0)
        edit_at = T0 + COOLDOWN + timedelta(hours=1)

        first_session = self.SessionLocal()
        second_session = self.SessionLocal()
        try:
            accepted = submit_guess(first_session, self.property.id, self.user.id, 430_000, now=edit_at)
            with self.assertRaises(CooldownActiveError) as ctx:
                submit_guess(
                    second_session,
                    self.property.id,
                    self.user.id,
                    440_000,
                    now=edit_at + timedelta(seconds=1),
                )
        finally:
            first_session.close()
            second_session.close()

        self.assertFalse(accepted.created)
        self.assertEqual(ctx.exception.cooldown_ends_at, edit_at + COOLDOWN)
        self.db.expire_all()
        stored = self.db.scalars(select(PriceGuess)).one()
        self.assertEqual(stored.guessed_price, Decimal("430000.00"))

    def test_guesses_from_different_users_are_independent(self) -> None:
        submit_guess(self.db, self.property.id, self.user.id, 425_000, now=T0)
        result = submit_guess(self.db, self.property.id, self.other_user.id, 430_000, now=T0)
        self.assertTrue(result.created)
        self.assertEqual(self._guess_count(self.property.id), 2)

    def test_meme_guess_is_flagged_against_assessed_value(self) -> None:
        result = submit_guess(self.db, self.property.id, self.user.id, 1, now=T0)
        self.assertTrue(result.guess.is_outlier)

    def test_property_without_assessed_value_never_flags(self) -> None:
        result = submit_guess(self.db, self.unassessed.id, self.user.id, 1, now=T0)
        self.assertFalse(result.guess.is_outlier)

    def test_missing_identity_is_unauthorized(self) -> None:
        with self.assertRaises(UnauthorizedError):
            submit_guess(self.db, self.property.id, None, 425_000, now=T0)
        self.assertEqual(self._guess_count(self.property.id), 0)

    def test_invalid_prices_never_reach_the_store(self) -> None:
        for bad_price in (0, -1, "abc", float("nan"), float("inf"), True, None, [1], "0.001", 10**13):
            with self.subTest(price=bad_price):
                with self.assertRaises(InvalidGuessError):
                    submit_guess(self.db, self.property.id, self.user.id, bad_price, now=T0)
        self.assertEqual(self._guess_count(self.property.id), 0)

    def test_unknown_property_is_not_found(self) -> None:
        with self.assertRaises(PropertyNotFoundError):
            submit_guess(self.db, 987_654, self.user.id, 425_000, now=T0)

    def test_price_normalization_rounds_to_cents(self) -> None:
        self.assertEqual(normalize_guessed_price(425000.456), Decimal("425000.46"))
        self.assertEqual(normalize_guessed_price("310000"), Decimal("310000.00"))


if __name__ == "__main__":
    unittest.main()
