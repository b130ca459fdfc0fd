from .exam_client import ExamServiceClient
from .section_watcher import SectionWatcher

__all__ = ["ExamServiceClient", "SectionWatcher"]
