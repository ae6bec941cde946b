from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict, Literal
from datetime import datetime

# ------------------- ENVELOPE -------------------

class Envelope(BaseModel):
    success: bool = True
    message: str

class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[Dict[str, str]] = None

# ------------------- USER SCHEMAS -------------------

# Fields are optional so a missing one is reported in the envelope, not as a 422
class UserCreate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class UserLogin(UserCreate):
    pass

class RegisteredUser(BaseModel):
    username: str
    registered_at: datetime

class RegisterResponse(Envelope):
    data: RegisteredUser

class LoginData(BaseModel):
    username: str
    token: str
    expires_in: str

class LoginResponse(Envelope):
    data: LoginData

class ProfileData(BaseModel):
    username: str
    registered_at: Optional[datetime] = None
    last_login: str

class ProfileResponse(Envelope):
    data: ProfileData

# ------------------- BOOK SCHEMAS -------------------

class BookResponse(BaseModel):
    model_config = ConfigDict(from_attributes = True)

    author: str
    title: str
    reviews: Dict[str, str]
    genre: List[str]
    year: int
    rating: float

class BookDetailResponse(Envelope):
    data: BookResponse
    isbn: str

class BookCollectionResponse(Envelope):
    data: Dict[str, BookResponse]
    count: int
    timestamp: datetime
    search_term: Optional[str] = None

# ------------------- REVIEW SCHEMAS -------------------

class ReviewUpsert(BaseModel):
    review: Optional[str] = None

class ReviewListResponse(Envelope):
    data: Dict[str, str]
    isbn: str
    count: int
    has_reviews: bool

class ReviewWriteData(BaseModel):
    isbn: str
    username: str
    review: str
    timestamp: datetime
    action: Literal["added", "updated"]

class ReviewWriteResponse(Envelope):
    data: ReviewWriteData

class ReviewDeleteData(BaseModel):
    isbn: str
    username: str
    deleted_at: datetime

class ReviewDeleteResponse(Envelope):
    data: ReviewDeleteData

# ------------------- SYSTEM SCHEMAS -------------------

class HealthResponse(Envelope):
    timestamp: datetime
    uptime: float
    service: str
    version: str
