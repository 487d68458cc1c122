from sqlalchemy import Column, String, DateTime, Date, Integer, Boolean, Text, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
import datetime
import uuid
from .database import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=True)  # null for OAuth-only accounts
    name = Column(String, nullable=True)
    image = Column(Text, nullable=True)  # data URL used directly as <img src>
    bio = Column(Text, nullable=True)
    job_title = Column(String, nullable=True)
    location = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    website = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    portfolio = relationship("Portfolio", back_populates="user", uselist=False, cascade="all, delete-orphan")
    experiences = relationship("Experience", cascade="all, delete-orphan")
    educations = relationship("Education", cascade="all, delete-orphan")
    projects = relationship("Project", cascade="all, delete-orphan")
    skills = relationship("Skill", cascade="all, delete-orphan")
    social_links = relationship("SocialLink", cascade="all, delete-orphan")
    ai_requests = relationship("AIRequest", cascade="all, delete-orphan")
    settings = relationship("UserSettings", uselist=False, cascade="all, delete-orphan")

class UserSettings(Base):
    __tablename__ = "user_settings"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    email_notifications = Column(Boolean, nullable=False, default=True)
    marketing_emails = Column(Boolean, nullable=False, default=False)
    theme = Column(String(16), nullable=False, default="system")  # 'light', 'dark', 'system'
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

class Portfolio(Base):
    __tablename__ = "portfolios"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    title = Column(String(100), nullable=False)
    subtitle = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, nullable=False, default=0)
    seo_title = Column(String(70), nullable=True)
    seo_description = Column(String(160), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    user = relationship("User", back_populates="portfolio")
    theme = relationship("PortfolioTheme", back_populates="portfolio", uselist=False, cascade="all, delete-orphan")
    custom_sections = relationship("CustomSection", back_populates="portfolio", cascade="all, delete-orphan")

class PortfolioTheme(Base):
    __tablename__ = "portfolio_themes"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    portfolio_id = Column(Uuid(as_uuid=True), ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=False, unique=True)
    layout = Column(String(16), nullable=False, default="grid")  # 'grid', 'timeline', 'cards'
    primary_color = Column(String(7), nullable=False, default="#3b82f6")
    secondary_color = Column(String(7), nullable=False, default="#10b981")
    background_color = Column(String(7), nullable=False, default="#ffffff")
    font_family = Column(String(50), nullable=False, default="Inter")
    background_image = Column(Text, nullable=True)
    custom_css = Column(Text, nullable=True)  # stored already sanitized
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    portfolio = relationship("Portfolio", back_populates="theme")

class CustomSection(Base):
    __tablename__ = "custom_sections"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    portfolio_id = Column(Uuid(as_uuid=True), ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    type = Column(String(16), nullable=False)  # 'text', 'gallery', 'timeline', 'skills', 'custom'
    content = Column(Text, nullable=True)  # serialized JSON, validated against type on read
    order = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    portfolio = relationship("Portfolio", back_populates="custom_sections")

class Experience(Base):
    __tablename__ = "experiences"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    company = Column(String, nullable=False)
    location = Column(String, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    current = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

class Education(Base):
    __tablename__ = "educations"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    school = Column(String, nullable=False)
    degree = Column(String, nullable=False)
    field = Column(String, nullable=True)
    location = Column(String, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    current = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

class Project(Base):
    __tablename__ = "projects"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    technologies = Column(JSON, nullable=False, default=list)  # array of strings
    live_url = Column(String, nullable=True)
    repo_url = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

class Skill(Base):
    __tablename__ = "skills"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    proficiency = Column(Integer, nullable=True)  # 0-100
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

class SocialLink(Base):
    __tablename__ = "social_links"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(String, nullable=False)  # 'GitHub', 'Twitter', 'LinkedIn', ...
    url = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

class AIRequest(Base):
    """Billable AI call, also the source of the hourly per-user cap"""
    __tablename__ = "ai_requests"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    request_type = Column(String, nullable=False)  # 'enhance-improve', 'generate-bio', 'recommend-skills', ...
    prompt_length = Column(Integer, nullable=False)
    response_length = Column(Integer, nullable=True)
    model = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, index=True)
