#!/usr/bin/env python3
import sys
import logging
from datetime import datetime
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables before the app reads its settings
load_dotenv()

from sqlalchemy.exc import SQLAlchemyError

from apps.portfolio_service.app.database import SessionLocal, get_engine
from apps.portfolio_service.app.models import (
    AIRequest,
    CustomSection,
    Education,
    Experience,
    Portfolio,
    Project,
    Skill,
    SocialLink,
    User,
    UserSettings,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

class UserDataPurger:
    def __init__(self):
        get_engine()
        self.db = SessionLocal()

    def summarize(self, user: User) -> Dict[str, int]:
        """Count the rows that will go with the user."""
        counts = {
            model.__tablename__: self.db.query(model).filter(model.user_id == user.id).count()
            for model in (Experience, Education, Project, Skill, SocialLink, AIRequest, UserSettings)
        }
        portfolio = self.db.query(Portfolio).filter(Portfolio.user_id == user.id).first()
        counts["portfolios"] = 1 if portfolio else 0
        counts["custom_sections"] = (
            self.db.query(CustomSection).filter(CustomSection.portfolio_id == portfolio.id).count() if portfolio else 0
        )
        return counts

    def purge_user_data(self, email: str) -> Dict[str, Any]:
        """Delete a user and everything they own."""
        user = self.db.query(User).filter(User.email == email.lower()).first()
        if not user:
            raise LookupError(f"No user with email {email}")

        results = {
            "user_id": str(user.id),
            "timestamp": datetime.utcnow().isoformat(),
            "deleted": self.summarize(user),
        }
        try:
            self.db.delete(user)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return results

    def close(self):
        self.db.close()

def main():
    if len(sys.argv) != 2:
        print("Usage: python -m scripts.purge_user_data <email>")
        sys.exit(1)

    email = sys.argv[1]
    purger = UserDataPurger()
    try:
        results = purger.purge_user_data(email)
    except LookupError as e:
        logger.error(str(e))
        sys.exit(1)
    finally:
        purger.close()

    logger.info(f"Purged user {results['user_id']} ({email})")
    for table, count in results["deleted"].items():
        logger.info(f"  {table}: {count}")

if __name__ == "__main__":
    main()
