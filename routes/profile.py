from fastapi import APIRouter, Depends
from typing import List

from models import User
from routes.auth import get_current_user
from schemas.profile import InterestResponse, ProfileCreate, ProfileResponse
from services import accounts
from stores.interfaces import PortalStore
from stores.sql_store import get_store

router = APIRouter(prefix="/api")


@router.get("/profile", response_model=ProfileResponse)
def get_profile(user: User = Depends(get_current_user), store: PortalStore = Depends(get_store)):
    return accounts.get_profile(store, user)


@router.post("/profile", response_model=ProfileResponse, status_code=201)
def create_profile(
    data: ProfileCreate,
    user: User = Depends(get_current_user),
    store: PortalStore = Depends(get_store)
):
    """Create the business partner profile of the logged-in user"""
    return accounts.create_profile(store, user, data.model_dump(exclude={"interests"}), data.interests)


@router.put("/profile/{profile_id}", response_model=ProfileResponse)
def update_profile(
    profile_id: str,
    data: ProfileCreate,
    user: User = Depends(get_current_user),
    store: PortalStore = Depends(get_store)
):
    """
    Replace the profile fields
    Interests are only replaced when the payload sends them
    """
    interests = data.interests if "interests" in data.model_fields_set else None
    return accounts.update_profile(
        store, user, profile_id, data.model_dump(exclude={"interests"}), interests
    )


@router.get("/interests", response_model=List[InterestResponse])
def list_interests(store: PortalStore = Depends(get_store)):
    return store.list_interests()
