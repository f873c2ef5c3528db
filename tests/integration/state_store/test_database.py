"""Integration tests for State Store database."""

from pathlib import Path

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError

from courseboard.state_store import StoreFailureError
from courseboard.state_store.database import Database
from courseboard.state_store.models import Course, Enrollment, PointsLedgerEntry, User


@pytest.fixture
def database(temp_db_path: str):
    """Create a database instance with tables."""
    db = Database(temp_db_path)
    db.create_tables()
    yield db
    db.close()


@pytest.mark.integration
class TestDatabaseSetup:
    """Tests for database creation and pragmas."""

    def test_tables_created(self, database: Database) -> None:
        tables = set(inspect(database.engine).get_table_names())

        assert tables == {"users", "courses", "enrollments", "user_interactions", "points_ledger"}

    def test_wal_mode_enabled(self, database: Database) -> None:
        assert database.is_wal_mode()

    def test_foreign_keys_enforced(self, database: Database) -> None:
        with database.get_session() as session:
            session.add(Enrollment(user_id="missing", course_id="missing"))
            with pytest.raises(IntegrityError):
                session.commit()

    def test_ledger_unique_constraint(self, database: Database) -> None:
        with database.get_session() as session:
            user = User(email="a@example.com")
            course = Course(title="T", category="C", difficulty="beginner")
            enrollment = Enrollment(user_id=user.id, course_id=course.id)
            session.add_all([user, course])
            session.flush()
            session.add(enrollment)
            session.flush()
            for _ in range(2):
                session.add(
                    PointsLedgerEntry(
                        user_id=user.id,
                        enrollment_id=enrollment.id,
                        reason="video_completed",
                        reference="v1",
                        points=25,
                    )
                )
            with pytest.raises(IntegrityError):
                session.commit()

    def test_data_persists_across_instances(self, temp_db_path: str) -> None:
        first = Database(temp_db_path)
        first.create_tables()
        with first.get_session() as session:
            session.add(User(email="persist@example.com"))
            session.commit()
        first.close()

        second = Database(temp_db_path)
        with second.get_session() as session:
            count = session.execute(text("SELECT COUNT(*) FROM users")).scalar()
        second.close()

        assert count == 1


    def test_unopenable_path_is_store_failure(self, tmp_path: Path) -> None:
        db = Database(str(tmp_path))

        with pytest.raises(StoreFailureError):
            db.create_tables()
        with pytest.raises(StoreFailureError):
            db.is_wal_mode()
        db.close()


@pytest.mark.integration
class TestSessionScope:
    """Tests for Database.session_scope."""

    def test_operational_error_becomes_store_failure(self, database: Database) -> None:
        with pytest.raises(StoreFailureError), database.session_scope() as session:
            session.execute(text("SELECT * FROM no_such_table"))

    def test_rolls_back_on_error(self, database: Database) -> None:
        with pytest.raises(RuntimeError), database.session_scope() as session:
            session.add(User(email="rollback@example.com"))
            session.flush()
            raise RuntimeError("boom")

        with database.session_scope() as session:
            assert session.execute(text("SELECT COUNT(*) FROM users")).scalar() == 0
