"""
Services Module - Services built on external collaborators
==========================================================

- Interview Prep: mock interview practice through a hosted LLM
"""

from .interview_prep import (
    InterviewPrepService,
    InterviewPrepRequest,
    InterviewPrepResult,
    InterviewQuestion,
    ResponseAnalysis,
    ACTIONS,
)

__all__ = [
    "InterviewPrepService",
    "InterviewPrepRequest",
    "InterviewPrepResult",
    "InterviewQuestion",
    "ResponseAnalysis",
    "ACTIONS",
]
