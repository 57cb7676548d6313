# dependencies.py
"""
Request-scoped dependencies: credentials, the current user and role gates.

The identity provider issues HS256 bearer tokens whose subject is the user id.
The role is never taken from the token; it is always read from the users table.
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from config import JWT_ALGORITHM, JWT_AUDIENCE, JWT_SECRET
from database import get_session
from errors import Forbidden, Unauthorized
from models import User
from services.user_service import UserService

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> Optional[str]:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          return None
     token = auth[len("Bearer "):].strip()
     return token or None


def decode_token(token: str) -> dict:
     """
     Verify a bearer token and return its claims.

     Raises:
          Unauthorized: If the signature, expiry or audience check fails
     """
     options = {"verify_aud": JWT_AUDIENCE is not None}
     try:
          return jwt.decode(
               token,
               JWT_SECRET,
               algorithms=[JWT_ALGORITHM],
               audience=JWT_AUDIENCE,
               options=options,
          )
     except JWTError as exc:
          logger.info("Rejected bearer token: %s", exc)
          raise Unauthorized("Invalid token") from exc


def get_principal_id(request: Request) -> str:
     """Authenticated principal id (`sub`, falling back to `id`)."""
     token = _bearer_token(request)
     if token is None:
          raise Unauthorized("Missing token")

     claims = decode_token(token)
     principal_id = claims.get("sub") or claims.get("id")
     if not principal_id:
          raise Unauthorized("Token has no subject")
     return str(principal_id)


def get_current_user(
     principal_id: str = Depends(get_principal_id),
     db: Session = Depends(get_session),
) -> User:
     return UserService.get_user(db, principal_id)


def require_owner(user: User = Depends(get_current_user)) -> User:
     if not user.is_owner:
          raise Forbidden("Only owners can perform this action")
     return user


def require_tenant(user: User = Depends(get_current_user)) -> User:
     if not user.is_tenant:
          raise Forbidden("Only tenants can perform this action")
     return user
