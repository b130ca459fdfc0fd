# app/models/relations.py

from sqlalchemy.orm import relationship

# Import all relevant models
from .exam_test import ExamTest, TestSection
from .test_attempt import AttemptSection, TestAttempt
from .user import User


def setup_relationships():
    """
    Configure all SQLAlchemy relationships between models.
    """

    # --- Test Definitions ---

    # 1. Test to Sections (One-to-Many, ordered by section number)
    ExamTest.sections = relationship(
        "TestSection",
        back_populates="test",
        cascade="all, delete-orphan",
        order_by="TestSection.section_number",
    )
    TestSection.test = relationship("ExamTest", back_populates="sections")

    # 2. Test to Attempts (One-to-Many)
    ExamTest.attempts = relationship("TestAttempt", back_populates="test")
    TestAttempt.test = relationship("ExamTest", back_populates="attempts")

    # --- Attempts ---

    # 3. Attempt to Sections (One-to-Many, ordered by section number)
    TestAttempt.sections = relationship(
        "AttemptSection",
        back_populates="attempt",
        cascade="all, delete-orphan",
        order_by="AttemptSection.section_number",
    )
    AttemptSection.attempt = relationship("TestAttempt", back_populates="sections")

    # 4. User to Attempts (One-to-Many)
    User.test_attempts = relationship(
        "TestAttempt",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    TestAttempt.user = relationship("User", back_populates="test_attempts")
