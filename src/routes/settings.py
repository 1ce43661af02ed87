"""
Settings Routes
User directory, expense categories and approver matrix administration
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import uuid

from src.config.database import get_db
from src.models.category import ExpenseCategoryRecord
from src.models.user import User
from src.schemas.category import CategoryCreate, ExpenseCategory
from src.schemas.matrix import ApproverMatrixTier, MatrixReplace, MatrixTierCreate
from src.schemas.user import UserCreate, UserProfile, UserUpdate
from src.services import state_store
from src.services.auth_service import auth_service
from src.utils.exceptions import UserNotFoundError
from src.utils.logger import setup_logger, log_audit

logger = setup_logger()
router = APIRouter()

require_settings = auth_service.require_module("settings")


# ============================================
# USERS
# ============================================

@router.get("/users", response_model=List[UserProfile])
async def list_users(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.get_current_user)
):
    """
    List the user directory

    Open to every user: claimants need it to pick approvers.
    """
    return state_store.load_users(db)


@router.post("/users", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(require_settings)
):
    """Create a user"""
    if db.query(User).filter(User.id == user_data.id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"User id '{user_data.id}' already exists"
        )
    if db.query(User).filter(User.email == user_data.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Email '{user_data.email}' already registered"
        )

    user = User(**user_data.model_dump())
    db.add(user)
    db.commit()
    db.refresh(user)

    log_audit(current_user.id, "CREATE_USER", f"user={user.id} role={user.role.value}")
    logger.info(f"User {user.id} created by {current_user.id}")
    return UserProfile.model_validate(user)


@router.put("/users/{user_id}", response_model=UserProfile)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(require_settings)
):
    """
    Update name, role, module access or active flag

    Role changes do not touch reports already submitted.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UserNotFoundError(user_id)

    if user_id == current_user.id and user_data.is_active is False:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot deactivate your own account"
        )

    changes = user_data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    log_audit(current_user.id, "UPDATE_USER", f"user={user_id} changes={sorted(changes)}")
    return UserProfile.model_validate(user)


# ============================================
# CATEGORIES
# ============================================

@router.get("/categories", response_model=List[ExpenseCategory])
async def list_categories(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.get_current_user)
):
    """List expense categories"""
    return state_store.load_categories(db)


@router.post("/categories", response_model=ExpenseCategory, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(require_settings)
):
    """Create an expense category"""
    if db.query(ExpenseCategoryRecord).filter(ExpenseCategoryRecord.id == category_data.id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Category id '{category_data.id}' already exists"
        )

    record = ExpenseCategoryRecord(**category_data.model_dump())
    db.add(record)
    db.commit()

    log_audit(current_user.id, "CREATE_CATEGORY", f"category={record.id} gl={record.gl_code}")
    return ExpenseCategory.model_validate(record)


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(require_settings)
):
    """Delete an expense category; existing report lines keep their category id"""
    record = db.query(ExpenseCategoryRecord).filter(ExpenseCategoryRecord.id == category_id).first()
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    db.delete(record)
    db.commit()

    log_audit(current_user.id, "DELETE_CATEGORY", f"category={category_id}")
    return {"success": True, "message": f"Category {category_id} deleted"}


# ============================================
# APPROVER MATRIX
# ============================================

@router.get("/matrix", response_model=List[ApproverMatrixTier])
async def get_matrix(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.get_current_user)
):
    """Matrix tiers in evaluation order"""
    return state_store.load_matrix(db)


@router.put("/matrix", response_model=List[ApproverMatrixTier])
async def replace_matrix(
    matrix_data: MatrixReplace,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(require_settings)
):
    """
    Replace the whole matrix

    Tier order is kept exactly as given; the first matching tier wins.
    Pending reports keep the approvers they were submitted with.
    """
    state = state_store.load_state(db)
    state_store.save_state(db, state.model_copy(update={"matrix": matrix_data.tiers}))

    log_audit(current_user.id, "REPLACE_MATRIX", f"tiers={[t.id for t in matrix_data.tiers]}")
    return state_store.load_matrix(db)


@router.post("/matrix/tiers", response_model=List[ApproverMatrixTier], status_code=status.HTTP_201_CREATED)
async def add_matrix_tier(
    tier_data: MatrixTierCreate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(require_settings)
):
    """Append a tier at the end of the matrix"""
    state = state_store.load_state(db)
    tier_id = tier_data.id or f"m-{uuid.uuid4().hex[:8]}"
    if any(t.id == tier_id for t in state.matrix):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Tier id '{tier_id}' already exists"
        )

    try:
        tier = ApproverMatrixTier(**{**tier_data.model_dump(), "id": tier_id})
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    state_store.save_state(db, state.model_copy(update={"matrix": [*state.matrix, tier]}))

    log_audit(current_user.id, "ADD_MATRIX_TIER", f"tier={tier_id} {tier.currency} {tier.min_amount}-{tier.max_amount}")
    return state_store.load_matrix(db)


@router.delete("/matrix/tiers/{tier_id}", response_model=List[ApproverMatrixTier])
async def delete_matrix_tier(
    tier_id: str,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(require_settings)
):
    """Remove one tier; the remaining tiers keep their relative order"""
    state = state_store.load_state(db)
    remaining = [t for t in state.matrix if t.id != tier_id]
    if len(remaining) == len(state.matrix):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tier not found")

    state_store.save_state(db, state.model_copy(update={"matrix": remaining}))

    log_audit(current_user.id, "DELETE_MATRIX_TIER", f"tier={tier_id}")
    return state_store.load_matrix(db)
