"""User registration, login and business-partner profiles."""

from typing import Any, Dict, List, Optional

from models import BusinessPartner, User
from services.errors import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from stores.interfaces import PortalStore
from utils.logging_config import get_logger

logger = get_logger("services")


def register_user(store: PortalStore, data: Dict[str, Any]) -> User:
    data = dict(data)
    if store.get_user_by_email(data["email"]):
        raise ValidationError("Email already in use", field="email")
    if store.get_user_by_username(data["username"]):
        raise ValidationError("Username already taken", field="username")

    data["password_hash"] = User.hash_password(data.pop("password"))
    user = store.create_user(data)
    logger.info(f"User {user.id} registered")
    return user


def authenticate(store: PortalStore, email: str, password: str) -> User:
    user = store.get_user_by_email(email)
    if not user or not user.verify_password(password):
        raise AuthenticationError("Invalid email or password")
    return user


def get_profile(store: PortalStore, user: User) -> BusinessPartner:
    partner = store.get_partner_by_user_id(user.id)
    if not partner:
        raise NotFoundError("Profile not found")
    return partner


def create_profile(store: PortalStore, user: User, data: Dict[str, Any],
                   interests: List[str]) -> BusinessPartner:
    if store.get_partner_by_user_id(user.id):
        raise ValidationError("Profile already exists")

    partner = store.create_partner(dict(data, user_id=user.id), interests)
    logger.info(f"Business partner {partner.id} created for user {user.id}")
    return partner


def update_profile(store: PortalStore, user: User, partner_id: str, data: Dict[str, Any],
                   interests: Optional[List[str]]) -> BusinessPartner:
    partner = store.get_partner(partner_id)
    if not partner or partner.user_id != user.id:
        raise AuthorizationError("Not authorized to update this profile")

    return store.update_partner(partner, data, interests)
