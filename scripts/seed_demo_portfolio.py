#!/usr/bin/env python3
"""
Seed a demo account with a published portfolio.

Usage: python -m scripts.seed_demo_portfolio [email] [password]
"""
import sys
import json
import logging
from datetime import date
from dotenv import load_dotenv

# Load environment variables before the app reads its settings
load_dotenv()

from apps.portfolio_service.app.auth import get_password_hash
from apps.portfolio_service.app.database import SessionLocal, create_tables
from apps.portfolio_service.app.models import (
    CustomSection,
    Education,
    Experience,
    Portfolio,
    PortfolioTheme,
    Project,
    Skill,
    SocialLink,
    User,
)
from apps.portfolio_service.app.sections import parse_section_content, serialize_section_content
from apps.portfolio_service.app.utils import slugify

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

DEMO_NAME = "Demo User"

DEMO_SECTIONS = [
    ("About me", "text", [
        {"_type": "block", "style": "normal", "children": [
            {"_type": "span", "text": "I design and build "},
            {"_type": "span", "text": "reliable", "marks": ["strong"]},
            {"_type": "span", "text": " backend systems."},
        ]},
    ]),
    ("Highlights", "timeline", [
        {"date": "2019", "title": "First production deploy", "description": "Shipped a payments API."},
        {"date": "2022", "title": "Tech lead", "description": "Led a team of five engineers."},
    ]),
    ("Toolbox", "skills", [
        {"name": "Python", "level": 90, "category": "Languages"},
        {"name": "TypeScript", "level": 70, "category": "Languages"},
        {"name": "PostgreSQL", "level": 80, "category": "Data"},
    ]),
    ("Gallery", "gallery", [
        {"url": "https://picsum.photos/seed/portfolio/600/400", "title": "Conference talk"},
    ]),
]

def seed(email: str, password: str) -> User:
    create_tables()
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user:
            logger.info(f"Demo user {email} already exists ({user.id})")
            return user

        user = User(
            email=email,
            name=DEMO_NAME,
            password_hash=get_password_hash(password),
            job_title="Backend Engineer",
            location="London, UK",
            bio="Engineer who enjoys turning messy problems into simple services.",
        )
        db.add(user)
        db.flush()

        db.add_all([
            Experience(user_id=user.id, title="Senior Engineer", company="Acme Corp",
                       start_date=date(2021, 4, 1), current=True, description="Platform team."),
            Experience(user_id=user.id, title="Engineer", company="Initech",
                       start_date=date(2017, 9, 1), end_date=date(2021, 3, 31)),
            Education(user_id=user.id, school="University of Leeds", degree="BSc",
                      field="Computer Science", start_date=date(2013, 9, 1), end_date=date(2016, 6, 30)),
            Project(user_id=user.id, title="Portfolio builder",
                    description="Themeable portfolio pages with custom sections.",
                    technologies=["Python", "FastAPI", "SQLAlchemy"], is_featured=True),
            Skill(user_id=user.id, name="Python", category="Languages", proficiency=90, order=0),
            Skill(user_id=user.id, name="Docker", category="Tools", proficiency=75, order=1),
            SocialLink(user_id=user.id, platform="GitHub", url="https://github.com/demo"),
        ])

        portfolio = Portfolio(
            user_id=user.id,
            slug=slugify(DEMO_NAME),
            title=DEMO_NAME,
            subtitle="Backend Engineer",
            is_published=True,
        )
        db.add(portfolio)
        db.flush()
        db.add(PortfolioTheme(portfolio_id=portfolio.id, layout="cards", primary_color="#6366f1"))

        for order, (title, section_type, content) in enumerate(DEMO_SECTIONS):
            validated = parse_section_content(json.dumps(content), section_type)
            if validated is None:
                raise ValueError(f"Demo section {title!r} does not match type {section_type}")
            db.add(CustomSection(
                portfolio_id=portfolio.id,
                title=title,
                type=section_type,
                content=serialize_section_content(validated),
                order=order,
            ))

        db.commit()
        db.refresh(user)
        logger.info(f"Seeded demo user {email} with portfolio /p/{portfolio.slug}")
        return user
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    email = sys.argv[1] if len(sys.argv) > 1 else "demo@example.com"
    password = sys.argv[2] if len(sys.argv) > 2 else "demo-password"
    seed(email, password)
