"""
Models package initialization
Import all models and setup relationships
"""

from .exam_test import ExamTest, TestSection
from .question import Question

# Import and setup relationships
from .relations import setup_relationships
from .test_attempt import AttemptSection, TestAttempt
from .user import User

# Setup all relationships after models are imported
setup_relationships()

# Make models available at package level
__all__ = [
    "AttemptSection",
    "ExamTest",
    "Question",
    "TestAttempt",
    "TestSection",
    "User",
]
