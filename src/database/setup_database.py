"""
Database Setup Script
Creates all tables and seeds the default directory, categories and matrix
"""

import sys
from pathlib import Path
from typing import Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from sqlalchemy.orm import Session

from src.config.database import Base, SessionLocal, engine
from src.config.defaults import DEFAULT_APPROVER_MATRIX, DEFAULT_CATEGORIES, DEFAULT_USERS
from src.models import (
    ApproverMatrixTierRecord,
    ExpenseCategoryRecord,
    REPORT_SEQUENCE,
    SequenceCounter,
    User,
)
from src.schemas.user import UserRole
from src.utils.logger import setup_logger

logger = setup_logger()


def create_tables():
    """Create all database tables"""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def create_initial_users(db: Session) -> int:
    """Seed the default users if the directory is empty"""
    if db.query(User).first():
        return 0
    for data in DEFAULT_USERS:
        db.add(User(**{**data, "role": UserRole(data["role"])}))
    return len(DEFAULT_USERS)


def create_initial_categories(db: Session) -> int:
    """Seed the default expense categories if none exist"""
    if db.query(ExpenseCategoryRecord).first():
        return 0
    for data in DEFAULT_CATEGORIES:
        db.add(ExpenseCategoryRecord(**data))
    return len(DEFAULT_CATEGORIES)


def create_initial_matrix(db: Session) -> int:
    """Seed the default approver matrix, preserving its order"""
    if db.query(ApproverMatrixTierRecord).first():
        return 0
    for position, data in enumerate(DEFAULT_APPROVER_MATRIX):
        db.add(ApproverMatrixTierRecord(position=position, **data))
    return len(DEFAULT_APPROVER_MATRIX)


def create_sequence_counter(db: Session) -> int:
    """Start the report-id counter at 1 if it does not exist"""
    exists = db.query(SequenceCounter).filter(SequenceCounter.name == REPORT_SEQUENCE).first()
    if exists:
        return 0
    db.add(SequenceCounter(name=REPORT_SEQUENCE, value=1))
    return 1


def seed_defaults(db: Optional[Session] = None):
    """
    Seed every default; safe to run repeatedly

    Args:
        db: Session to use; a new one is opened and closed when omitted
    """
    own_session = db is None
    db = db or SessionLocal()

    try:
        users = create_initial_users(db)
        categories = create_initial_categories(db)
        tiers = create_initial_matrix(db)
        counters = create_sequence_counter(db)
        db.commit()
        if users or categories or tiers or counters:
            logger.info(
                f"Seeded {users} users, {categories} categories, {tiers} matrix tiers, "
                f"{counters} sequence counter(s)"
            )
    except Exception:
        db.rollback()
        logger.exception("Error seeding default data")
        raise
    finally:
        if own_session:
            db.close()


def print_setup_summary():
    """Print setup summary"""
    print("\n" + "=" * 70)
    print("✓ DATABASE SETUP COMPLETED SUCCESSFULLY!")
    print("=" * 70)

    print("\n📋 DEFAULT USERS (send the id in the X-User-Id header):")
    for user in DEFAULT_USERS:
        print(f"  • {user['id']:<4} {user['name']:<16} {user['role']:<9} modules: {', '.join(user['accessible_modules'])}")

    print("\n📊 DEFAULT APPROVER MATRIX (first match wins):")
    for tier in DEFAULT_APPROVER_MATRIX:
        upper = "∞" if tier["max_amount"] is None else f"{tier['max_amount']:,}"
        print(f"  • {tier['currency']} {tier['min_amount']:,} - {upper}: {' & '.join(tier['required_roles'])}")

    print("\n🚀 NEXT STEPS:")
    print("  1. Start the application: uvicorn src.main:app --reload")
    print("  2. Access API Documentation: http://localhost:8000/api/docs")
    print("\n" + "=" * 70 + "\n")


def main():
    """Main setup function"""
    print("=" * 70)
    print("EXPENSE CLAIM APPROVAL SYSTEM - DATABASE SETUP")
    print("=" * 70)

    try:
        create_tables()
        seed_defaults()
        print_setup_summary()

    except Exception as e:
        print(f"\n✗ Database setup failed: {str(e)}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
