from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator
from typing import Any, Dict, List, Literal, Optional
from datetime import date, datetime
from uuid import UUID
from .sections import SectionType
from .theme import HEX_COLOR_PATTERN

SLUG_PATTERN = r"^[a-z0-9-]+$"

# Auth schemas
class UserRegister(BaseModel):
    name: Optional[str] = None
    email: EmailStr
    password: str = Field(min_length=6)

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserOut(BaseModel):
    id: UUID
    email: str
    name: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True

class RegisterResponse(BaseModel):
    success: bool = True
    user: UserOut

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# Profile schemas
class ProfileUpdate(BaseModel):
    name: str = Field(min_length=1)
    bio: Optional[str] = None
    job_title: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[HttpUrl] = None
    github: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None

class ProfileOut(BaseModel):
    id: UUID
    email: str
    name: Optional[str]
    image: Optional[str]
    bio: Optional[str]
    job_title: Optional[str]
    location: Optional[str]
    phone: Optional[str]
    website: Optional[str]
    github: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None

class UploadResponse(BaseModel):
    url: str

# Account settings schemas
class SettingsUpdate(BaseModel):
    email_notifications: bool
    marketing_emails: bool
    theme: Optional[Literal["light", "dark", "system"]] = None

class SettingsOut(BaseModel):
    email_notifications: bool
    marketing_emails: bool
    theme: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)

# Experience / education schemas
class ExperienceIn(BaseModel):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    current: bool = False
    description: Optional[str] = None

class ExperienceOut(ExperienceIn):
    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class EducationIn(BaseModel):
    school: str = Field(min_length=1)
    degree: str = Field(min_length=1)
    field: Optional[str] = None
    location: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    current: bool = False
    description: Optional[str] = None

class EducationOut(EducationIn):
    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

# Project / skill / social link schemas
class ProjectIn(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=10, max_length=500)
    technologies: List[str] = []
    live_url: Optional[HttpUrl] = None
    repo_url: Optional[HttpUrl] = None
    image_url: Optional[str] = None
    is_featured: bool = False
    order: int = 0

class ProjectOut(BaseModel):
    id: UUID
    title: str
    description: str
    technologies: List[str]
    live_url: Optional[str]
    repo_url: Optional[str]
    image_url: Optional[str]
    is_featured: bool
    order: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class SkillIn(BaseModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None
    proficiency: Optional[int] = Field(default=None, ge=0, le=100)
    order: int = 0

class SkillOut(SkillIn):
    id: UUID

    class Config:
        from_attributes = True

class SocialLinkIn(BaseModel):
    platform: str = Field(min_length=1)
    url: HttpUrl

class SocialLinkOut(BaseModel):
    id: UUID
    platform: str
    url: str

    class Config:
        from_attributes = True

# Portfolio schemas
class PortfolioCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    subtitle: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    is_published: bool = False
    seo_title: Optional[str] = Field(default=None, max_length=70)
    seo_description: Optional[str] = Field(default=None, max_length=160)

class PortfolioUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    subtitle: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    is_published: Optional[bool] = None
    seo_title: Optional[str] = Field(default=None, max_length=70)
    seo_description: Optional[str] = Field(default=None, max_length=160)

class PortfolioOut(BaseModel):
    id: UUID
    slug: str
    title: str
    subtitle: Optional[str]
    description: Optional[str]
    is_published: bool
    view_count: int
    seo_title: Optional[str]
    seo_description: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class PublicPortfolio(BaseModel):
    portfolio: PortfolioOut
    user: ProfileOut
    skills: List[SkillOut]
    projects: List[ProjectOut]
    experiences: List[ExperienceOut]
    educations: List[EducationOut]
    social_links: List[SocialLinkOut]

# Custom section schemas
class SectionUpsert(BaseModel):
    id: Optional[UUID] = None
    title: str = Field(min_length=1)
    type: SectionType
    content: Any = None  # shape checked against `type` in the router
    is_published: bool = True
    order: int

class SectionOut(BaseModel):
    id: UUID
    portfolio_id: UUID
    title: str
    type: str
    content: Optional[str]
    order: int
    is_published: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class SectionOrder(BaseModel):
    id: str
    order: int

class SectionReorder(BaseModel):
    sections: List[SectionOrder]

# Theme schemas
class ThemeIn(BaseModel):
    layout: Literal["grid", "timeline", "cards"]
    primary_color: str = Field(pattern=HEX_COLOR_PATTERN)
    secondary_color: str = Field(pattern=HEX_COLOR_PATTERN)
    background_color: str = Field(pattern=HEX_COLOR_PATTERN)
    font_family: str = Field(min_length=1, max_length=50)
    background_image: Optional[str] = None
    custom_css: Optional[str] = None

class ThemeOut(BaseModel):
    layout: str
    primary_color: str
    secondary_color: str
    background_color: str
    font_family: str
    background_image: Optional[str]
    custom_css: Optional[str]
    portfolio_slug: Optional[str] = None

    class Config:
        from_attributes = True

# AI schemas
class EnhanceRequest(BaseModel):
    content: str = Field(min_length=10, max_length=5000)
    type: Literal["improve", "proofread", "simplify", "expand", "keywords"] = "improve"
    tone: Literal["professional", "conversational", "technical", "enthusiastic", "authoritative"] = "professional"

class BioRequest(BaseModel):
    skills: List[str] = Field(min_length=1)
    experience: str = Field(min_length=10)
    education: str = Field(min_length=10)
    tone: Literal["professional", "conversational", "technical", "enthusiastic", "authoritative"] = "professional"

class SkillRecommendationRequest(BaseModel):
    job_title: str = Field(min_length=2)
    current_skills: Optional[List[str]] = None
    experience: Optional[str] = None

    @field_validator("current_skills")
    @classmethod
    def strip_blank_skills(cls, value):
        if value is None:
            return value
        return [skill.strip() for skill in value if skill and skill.strip()]

class EnhanceResponse(BaseModel):
    enhanced_content: str

class BioResponse(BaseModel):
    bio_content: str

class SkillRecommendationResponse(BaseModel):
    skills: List[str]

class AnalyzePortfolioRequest(BaseModel):
    portfolio_id: UUID

class AnalyzePortfolioResponse(BaseModel):
    suggestions: List[str]

class HealthResponse(BaseModel):
    status: str
    service: str
    details: Optional[Dict[str, Any]] = None
