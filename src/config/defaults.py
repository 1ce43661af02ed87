# ============================================
# SEED DATA CONFIGURATION
# ============================================

"""
Default users, expense categories and approver matrix loaded on first start
"""

from typing import Dict, List, Any


# Modules a user may be granted access to
ALL_MODULES = ["dashboard", "new-claim", "approvals", "export", "settings"]

DEFAULT_USERS: List[Dict[str, Any]] = [
    {
        "id": "u1",
        "name": "Alex Rivera",
        "email": "alex@finance.com",
        "role": "employee",
        "accessible_modules": ["dashboard", "new-claim"],
        "is_active": True,
    },
    {
        "id": "u2",
        "name": "Sarah Chen",
        "email": "sarah@finance.com",
        "role": "manager",
        "accessible_modules": ["dashboard", "new-claim", "approvals"],
        "is_active": True,
    },
    {
        "id": "u3",
        "name": "Marcus Thorne",
        "email": "marcus@finance.com",
        "role": "finance",
        "accessible_modules": ["dashboard", "approvals", "export"],
        "is_active": True,
    },
    {
        "id": "u4",
        "name": "System Admin",
        "email": "admin@finance.com",
        "role": "admin",
        "accessible_modules": ALL_MODULES,
        "is_active": True,
    },
]

# GL codes feed the ERP export
DEFAULT_CATEGORIES: List[Dict[str, str]] = [
    {"id": "c1", "name": "Airfare & Travel", "gl_code": "60110"},
    {"id": "c2", "name": "Hotel & Lodging", "gl_code": "60120"},
    {"id": "c3", "name": "Business Meals", "gl_code": "60210"},
    {"id": "c4", "name": "Client Entertainment", "gl_code": "60220"},
    {"id": "c5", "name": "Office Equipment", "gl_code": "60310"},
    {"id": "c6", "name": "SaaS Subscriptions", "gl_code": "60410"},
]

# Order matters: the first matching tier wins
DEFAULT_APPROVER_MATRIX: List[Dict[str, Any]] = [
    {"id": "m1", "min_amount": 0, "max_amount": 500, "currency": "USD",
     "required_roles": ["manager"]},
    {"id": "m2", "min_amount": 501, "max_amount": 5000, "currency": "USD",
     "required_roles": ["manager", "finance"]},
    {"id": "m3", "min_amount": 5001, "max_amount": None, "currency": "USD",
     "required_roles": ["manager", "finance"]},
]
