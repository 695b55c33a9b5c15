from typing import Optional

from fastapi import APIRouter

from ..content import SUBJECTS, past_questions_for

router = APIRouter(prefix="/api", tags=["content"])


@router.get("/subjects")
def list_subjects():
	return list(SUBJECTS)


@router.get("/past-questions")
def list_past_questions(subject: Optional[str] = None):
	return [q.to_wire() for q in past_questions_for(subject)]
