"""Demo data for a fresh installation.

Every demo account uses ``DEMO_PASSWORD``. ``bob.wilson`` is inactive so that
the inactive-account path can be exercised by hand.
"""

from mpoly.models.user import UserRole, UserStatus
from mpoly.services.auth_service import AuthService
from mpoly.store import Collection, DocumentStore

DEMO_PASSWORD = "password123"
SEED_TIMESTAMP = "2025-01-01T09:00:00.000Z"

DEMO_USERS = [
    {
        "id": "usr-001",
        "userId": "admin",
        "name": "System Administrator",
        "email": "admin@mpoly.local",
        "role": UserRole.ADMIN.value,
        "department": "IT",
        "status": UserStatus.ACTIVE.value,
    },
    {
        "id": "usr-002",
        "userId": "john.doe",
        "name": "John Doe",
        "email": "john.doe@mpoly.local",
        "role": UserRole.GENERAL_USER.value,
        "department": "Finance",
        "status": UserStatus.ACTIVE.value,
    },
    {
        "id": "usr-003",
        "userId": "jane.smith",
        "name": "Jane Smith",
        "email": "jane.smith@mpoly.local",
        "role": UserRole.GENERAL_USER.value,
        "department": "Operations",
        "status": UserStatus.ACTIVE.value,
    },
    {
        "id": "usr-004",
        "userId": "bob.wilson",
        "name": "Bob Wilson",
        "email": "bob.wilson@mpoly.local",
        "role": UserRole.GENERAL_USER.value,
        "department": "Sales",
        "status": UserStatus.INACTIVE.value,
    },
]

# (id, owner, title, category, priority, status, amount)
_RECORD_ROWS = [
    ("rec-001", "usr-001", "Annual infrastructure audit", "Compliance", "High", "In Progress", "12500.00"),
    ("rec-002", "usr-002", "Q1 budget reconciliation", "Finance", "Critical", "Pending", "48200.50"),
    ("rec-003", "usr-002", "Vendor invoice review", "Finance", "Medium", "Completed", "3150.75"),
    ("rec-004", "usr-003", "Warehouse safety inspection", "Operations", "High", "Pending", "980.00"),
    ("rec-005", "usr-003", "Fleet maintenance schedule", "Operations", "Low", "Completed", "6400.00"),
    ("rec-006", "usr-004", "Regional sales forecast", "Sales", "Medium", "In Progress", "22000.00"),
]

DEMO_RECORDS = [
    {
        "id": rec_id,
        "userId": owner,
        "title": title,
        "category": category,
        "priority": priority,
        "status": status,
        "amount": amount,
        "createdAt": SEED_TIMESTAMP,
        "updatedAt": SEED_TIMESTAMP,
    }
    for rec_id, owner, title, category, priority, status, amount in _RECORD_ROWS
]


def build_users(password: str = DEMO_PASSWORD) -> list[dict[str, str]]:
    """Demo users with a freshly hashed password and creation stamp."""
    password_hash = AuthService.hash_password(password)
    return [
        {**user, "password": password_hash, "createdAt": SEED_TIMESTAMP}
        for user in DEMO_USERS
    ]


async def seed_store(store: DocumentStore, password: str = DEMO_PASSWORD) -> None:
    """Write both demo collections, replacing whatever is there."""
    await store.replace(Collection.USERS, build_users(password))
    await store.replace(Collection.RECORDS, [dict(r) for r in DEMO_RECORDS])
