# services/user_service.py
"""
User Service - resolves principals to profiles and edits the display name.
"""
import logging

from sqlalchemy.orm import Session

from errors import UserNotFound
from models import User

logger = logging.getLogger(__name__)


class UserService:
     """Service class for user profile operations."""

     @staticmethod
     def get_user(db: Session, user_id: str) -> User:
          """
          Fetch the profile row of an authenticated principal.

          Raises:
               UserNotFound: If the identity provider never created a profile
          """
          user = db.get(User, user_id)
          if user is None:
               logger.warning("Authenticated principal %s has no profile", user_id)
               raise UserNotFound()
          return user

     @staticmethod
     def update_full_name(db: Session, user: User, full_name: str) -> User:
          user.full_name = full_name
          db.commit()
          db.refresh(user)
          logger.info("User %s updated full name", user.id)
          return user
