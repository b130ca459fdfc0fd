"""
Tests for the database setup.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import registry

from app.core.database import Base, JSONType


class TestDeclarativeBase:
    def test_base_uses_orm_registry(self):
        assert isinstance(Base.registry, registry)
        assert {"users", "questions", "exam_tests", "test_attempts"} <= set(
            Base.metadata.tables
        )

    def test_json_type_per_dialect(self):
        assert isinstance(
            JSONType.dialect_impl(postgresql.dialect()), postgresql.JSONB
        )
        assert not isinstance(JSONType.dialect_impl(sqlite.dialect()), postgresql.JSONB)
