"""FastAPI application -- routes for the CertPrep study platform."""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Cookie, Depends, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession
from sqlalchemy.orm.exc import StaleDataError

from server.auth import SESSION_COOKIE, get_current_user
from server.config import Settings, configure_logging
from server.db.models import Exam, User
from server.dependencies import get_db_session, get_settings
from server.schemas import (
    ExamProgressResponse,
    ExamStructureResponse,
    FlashcardListResponse,
    LoginRequest,
    RatingRequest,
    RatingResponse,
    RegisterRequest,
    UserResponse,
)
from server.services import auth_service, exam_service, flashcard_service, progress_service
from server.services.exam_service import ExamAccessDeniedError, ExamNotFoundError
from server.services.flashcard_service import FlashcardFilters, InvalidStatusFilter
from server.services.progress_service import FlashcardNotFoundError
from server.__version__ import __version__
from study.clock import utc_now
from study.ratings import InvalidRating
from study.scheduler import InvalidQuality

logger = logging.getLogger("certprep")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan: configure logging and create tables."""
    from server.db.session import init_db
    settings = get_settings()
    configure_logging(settings)
    init_db(settings)
    ts = utc_now().isoformat()
    logger.info("[%s] Startup: database ready", ts)
    yield
    ts_end = utc_now().isoformat()
    logger.info("[%s] Shutdown: complete", ts_end)


app = FastAPI(title="CertPrep", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def _load_exam_for_user(db: DBSession, exam_code: str, user: User) -> Exam:
    try:
        exam = exam_service.get_exam_by_code(db, exam_code)
        exam_service.require_exam_access(db, user.id, exam)
    except ExamNotFoundError:
        raise HTTPException(status_code=404, detail="Exam not found")
    except ExamAccessDeniedError:
        raise HTTPException(status_code=403, detail="Access denied")
    return exam


# ---- Auth ----

@app.post("/auth/register", response_model=UserResponse)
def auth_register(
    body: RegisterRequest,
    response: Response,
    db: DBSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    try:
        user = auth_service.register_user(db, body.email, body.password)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    token = auth_service.create_session(db, user.id, ttl_hours=settings.session_ttl_hours)
    db.commit()
    _set_session_cookie(response, token, settings)
    return {"id": user.id, "email": user.email}


@app.post("/auth/login", response_model=UserResponse)
def auth_login(
    body: LoginRequest,
    response: Response,
    db: DBSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    user = auth_service.authenticate(db, body.email, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    token = auth_service.create_session(db, user.id, ttl_hours=settings.session_ttl_hours)
    db.commit()
    _set_session_cookie(response, token, settings)
    return {"id": user.id, "email": user.email}


@app.post("/auth/logout")
def auth_logout(
    response: Response,
    certprep_session: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    db: DBSession = Depends(get_db_session),
):
    if certprep_session:
        auth_service.logout_session(db, certprep_session)
        db.commit()
    response.delete_cookie(SESSION_COOKIE)
    return {"ok": True}


@app.get("/auth/me", response_model=UserResponse)
def auth_me(user: User = Depends(get_current_user)):
    return {"id": user.id, "email": user.email}


# ---- Health (no dependencies, always fast) ----

@app.get("/health")
def health():
    return {"ok": True}


# ---- Flashcard progress (SM-2 ratings) ----

@app.post("/flashcards/progress", response_model=RatingResponse)
def rate_flashcard(
    body: RatingRequest,
    user: User = Depends(get_current_user),
    db: DBSession = Depends(get_db_session),
):
    """Apply a forgot/hard/good/easy rating and return the new schedule."""
    if not body.flashcard_id or not body.rating:
        raise HTTPException(status_code=400, detail="Missing flashcard_id or rating")
    user_id = user.id
    try:
        progress = progress_service.apply_rating(db, user_id, body.flashcard_id, body.rating)
        db.commit()
    except (InvalidRating, InvalidQuality) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FlashcardNotFoundError:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    except (StaleDataError, IntegrityError):
        db.rollback()
        logger.warning(
            "Concurrent rating lost for user %s flashcard %s", user_id, body.flashcard_id,
        )
        raise HTTPException(status_code=409, detail="Progress was updated concurrently; retry")

    return {
        "success": True,
        "progress": progress_service.progress_to_dict(progress),
        "message": progress_service.review_message(progress),
    }


# ---- Flashcard listing ----

@app.get("/flashcards/{exam_code}", response_model=FlashcardListResponse)
def list_flashcards(
    exam_code: str,
    domain_id: Optional[str] = None,
    category_id: Optional[str] = None,
    skill_id: Optional[str] = None,
    status: Optional[str] = None,
    due_only: bool = False,
    search: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: DBSession = Depends(get_db_session),
):
    exam = _load_exam_for_user(db, exam_code, user)
    filters = FlashcardFilters(
        domain_id=domain_id,
        category_id=category_id,
        skill_id=skill_id,
        status=status,
        due_only=due_only,
        search=search,
    )
    try:
        listing = flashcard_service.list_flashcards(db, user.id, exam.id, filters)
    except InvalidStatusFilter as e:
        raise HTTPException(status_code=400, detail=str(e))

    cards = [flashcard_service.flashcard_row_to_dict(row) for row in listing]
    return {"flashcards": cards, "total": listing.count()}


# ---- Exam progress & structure ----

@app.get("/progress/{exam_code}", response_model=ExamProgressResponse)
def exam_progress(
    exam_code: str,
    user: User = Depends(get_current_user),
    db: DBSession = Depends(get_db_session),
):
    exam = _load_exam_for_user(db, exam_code, user)
    return progress_service.get_exam_progress(db, user.id, exam)


@app.get("/exams/{exam_code}/structure", response_model=ExamStructureResponse)
def exam_structure(
    exam_code: str,
    user: User = Depends(get_current_user),
    db: DBSession = Depends(get_db_session),
):
    exam = _load_exam_for_user(db, exam_code, user)
    return exam_service.get_exam_structure(db, exam)
