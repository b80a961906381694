"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Python attributes are snake_case; the JSON contract (and the stored
documents) are camelCase, via the alias generator on ApiModel.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    def to_document(self, **kwargs) -> dict:
        """camelCase dict ready to be stored in MongoDB."""
        return self.model_dump(by_alias=True, **kwargs)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    alumni = "alumni"
    staff = "staff"


class MentorshipStatus(str, Enum):
    pending = "pending"
    active = "active"
    rejected = "rejected"
    completed = "completed"


class MessageType(str, Enum):
    text = "text"
    file = "file"
    image = "image"


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class AssessmentCategory(str, Enum):
    aptitude = "aptitude"
    coding = "coding"
    general = "general"
    cs = "cs"
    ece = "ece"
    mba = "mba"


class PlacementType(str, Enum):
    full_time = "full_time"
    internship = "internship"


# ============================================================
# AUTH / USER SCHEMAS
# ============================================================

class RegisterRequest(ApiModel):
    username: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole = Field(UserRole.student, validate_default=True)
    full_name: str = Field(..., min_length=1)
    college: str = Field(..., min_length=1)
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)
    department: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("username", "full_name", "college")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdate(ApiModel):
    full_name: Optional[str] = Field(None, min_length=1)
    college: Optional[str] = Field(None, min_length=1)
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)
    department: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None


class UserResponse(ApiModel):
    id: str
    username: str
    email: str
    role: str
    full_name: str
    college: str
    graduation_year: Optional[int] = None
    department: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime


class UserSummary(ApiModel):
    """Profile fields embedded in joined rows; which ones are set depends on the join."""
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    graduation_year: Optional[int] = None
    avatar: Optional[str] = None


# ============================================================
# MENTORSHIP SCHEMAS
# ============================================================

class MentorshipCreate(ApiModel):
    mentor_id: str = Field(..., min_length=1)
    mentee_id: str = Field(..., min_length=1)
    field: Optional[str] = None
    # Accepted for client compatibility; new mentorships always start pending
    status: Optional[MentorshipStatus] = None


class MentorshipStatusUpdate(ApiModel):
    status: str


class MentorshipResponse(ApiModel):
    id: str
    mentor_id: str
    mentee_id: str
    requester_id: Optional[str] = None
    status: MentorshipStatus
    field: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class MentorshipDetailResponse(MentorshipResponse):
    mentor: UserResponse
    mentee: UserResponse


# ============================================================
# MESSAGE SCHEMAS
# ============================================================

class ChatMessageCreate(ApiModel):
    content: Optional[str] = None
    receiver_id: Optional[str] = None


class ChatMessageResponse(ApiModel):
    id: str
    mentorship_id: str
    sender_id: str
    receiver_id: str
    content: str
    message_type: MessageType = MessageType.text
    is_read: bool
    created_at: datetime


class ChatMessageDetailResponse(ChatMessageResponse):
    sender: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None


class UnreadCountResponse(ApiModel):
    unread: int


# ============================================================
# CONTENT SCHEMAS (feed, guides, assessments, events)
# ============================================================

class PostCreate(ApiModel):
    content: str = Field(..., min_length=1)
    company: Optional[str] = None
    field: Optional[str] = None

    @field_validator("content")
    @classmethod
    def strip_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class PostResponse(ApiModel):
    id: str
    author_id: str
    content: str
    company: Optional[str] = None
    field: Optional[str] = None
    likes: int = 0
    comments: int = 0
    created_at: datetime
    author: Optional[UserSummary] = None


class InterviewGuideCreate(ApiModel):
    company: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    experience: str = Field(..., min_length=1)
    questions: List[str] = Field(..., min_length=1)
    tips: Optional[str] = None
    difficulty: Difficulty


class InterviewGuideResponse(ApiModel):
    id: str
    author_id: str
    company: str
    role: str
    experience: str
    questions: List[str]
    tips: Optional[str] = None
    difficulty: Difficulty
    created_at: datetime
    author: Optional[UserSummary] = None


class AssessmentQuestion(ApiModel):
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0)
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def answer_in_range(self):
        if self.correct_answer >= len(self.options):
            raise ValueError("correctAnswer must index one of the options")
        return self


class AssessmentCreate(ApiModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: AssessmentCategory
    questions: List[AssessmentQuestion] = Field(..., min_length=1)
    time_limit: int = Field(..., gt=0, description="Minutes")
    total_questions: int = Field(..., gt=0)

    @model_validator(mode="after")
    def total_matches_questions(self):
        if self.total_questions != len(self.questions):
            raise ValueError("totalQuestions must equal the number of questions")
        return self


class AssessmentResponse(ApiModel):
    id: str
    title: str
    description: str
    category: AssessmentCategory
    questions: List[AssessmentQuestion]
    time_limit: int
    total_questions: int
    created_at: datetime


class AssessmentResultCreate(ApiModel):
    assessment_id: str = Field(..., min_length=1)
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., gt=0)
    time_spent: int = Field(..., ge=0, description="Seconds")
    answers: List[int] = []

    @model_validator(mode="after")
    def score_within_total(self):
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed totalQuestions")
        return self


class AssessmentResultResponse(ApiModel):
    id: str
    user_id: str
    assessment_id: str
    score: int
    total_questions: int
    time_spent: int
    answers: List[int]
    created_at: datetime


class EventCreate(ApiModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    date: datetime
    location: str = Field(..., min_length=1)
    images: List[str] = []
    chief_guest: Optional[str] = None


class EventResponse(ApiModel):
    id: str
    title: str
    description: str
    category: str
    date: datetime
    location: str
    images: List[str] = []
    chief_guest: Optional[str] = None
    organizer_id: str
    created_at: datetime
    organizer: Optional[UserSummary] = None


# ============================================================
# PLACEMENT SCHEMAS
# ============================================================

class PlacementCreate(ApiModel):
    student_id: Optional[str] = None
    company: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    package: float = Field(..., ge=0, description="Lakhs per annum")
    placement_type: PlacementType
    year: int = Field(..., ge=1900, le=2100)

    @field_validator("company", "role")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class PlacementResponse(ApiModel):
    id: str
    student_id: str
    company: str
    role: str
    package: float
    placement_type: PlacementType
    year: int
    created_at: datetime
    student: Optional[UserSummary] = None


class CompanyStat(ApiModel):
    company: str
    count: int
    min_package: float
    max_package: float


class PlacementStatsResponse(ApiModel):
    total_placements: int
    placement_rate: float
    average_package: float
    highest_package: float
    company_stats: List[CompanyStat]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    message: str
