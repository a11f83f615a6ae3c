from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.models.profile import Department, Profile
from app.schemas.user import DepartmentResponse, ProfileResponse, ProfileUpdate
from app.utils.auth import get_current_user


router = APIRouter(
    prefix="/profiles",
    tags=["profiles"],
)

departments_router = APIRouter(
    prefix="/departments",
    tags=["departments"],
)


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    return db.get(Profile, current_user["id"])


@router.put("/me", response_model=ProfileResponse)
def update_my_profile(
    profile_update: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Update the display name and department of the current user.
    """
    profile = db.get(Profile, current_user["id"])
    update_data = profile_update.model_dump(exclude_unset=True)
    if "department" in update_data and update_data["department"]:
        known = db.query(Department).filter(Department.name == update_data["department"]).first()
        if not known:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown department")
    for key, value in update_data.items():
        setattr(profile, key, value)
    db.commit()
    db.refresh(profile)
    return profile


@router.get("/{user_id}", response_model=ProfileResponse)
def get_profile(user_id: int, db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    profile = db.get(Profile, user_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@departments_router.get("/", response_model=List[DepartmentResponse])
def get_departments(db: Session = Depends(get_db)):
    return db.query(Department).order_by(Department.name).all()
