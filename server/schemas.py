"""Pydantic request/response schemas for the CertPrep API."""

from typing import List, Optional
from pydantic import BaseModel, Field


# ---- Auth ----

class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    id: str
    email: str


# ---- Progress ----

class RatingRequest(BaseModel):
    # Plain strings: missing or unknown values are answered with 400, not 422
    flashcard_id: Optional[str] = None
    rating: Optional[str] = None


class ProgressSchema(BaseModel):
    id: str
    flashcard_id: str
    status: str
    ease_factor: float
    interval_days: int
    repetitions: int
    next_review_date: str
    last_reviewed_at: Optional[str] = None


class RatingResponse(BaseModel):
    success: bool
    progress: ProgressSchema
    message: str


class DailyActivity(BaseModel):
    date: str
    count: int


class ExamProgressResponse(BaseModel):
    total_flashcards: int
    studied: int
    not_started: int
    new: int
    learning: int
    known: int
    due_for_review: int
    completion_percentage: int
    mastery_percentage: int
    recent_activity: List[DailyActivity]


# ---- Flashcards ----

class NodeRef(BaseModel):
    id: str
    title: str


class FlashcardItem(BaseModel):
    id: str
    question: str
    answer: str
    explanation: Optional[str] = None
    order: int
    skill: NodeRef
    category: NodeRef
    domain: NodeRef
    progress: Optional[ProgressSchema] = None


class FlashcardListResponse(BaseModel):
    flashcards: List[FlashcardItem]
    total: int


# ---- Exam structure ----

class CategoryRef(NodeRef):
    domain_id: str


class SkillRef(NodeRef):
    category_id: str


class ExamStructureResponse(BaseModel):
    domains: List[NodeRef]
    categories: List[CategoryRef]
    skills: List[SkillRef]
