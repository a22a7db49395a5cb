"""User service: creation, lookup, seeding and password upgrades.

Learn: Seeding is deliberately not idempotent: every call adds a fresh
batch of users with random names and numeric passwords. The generated
passwords are returned to the caller because only their hashes are kept.
"""

import secrets
import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from accountd.auth.password import DEFAULT_ROUNDS, hash_password
from accountd.db.models import User

logger = structlog.get_logger()

FIRST_NAMES = (
    "Ada", "Alan", "Barbara", "Claude", "Dennis", "Edsger", "Frances",
    "Grace", "Hedy", "John", "Katherine", "Ken", "Linus", "Margaret",
    "Niklaus", "Radia", "Tim", "Vint",
)
LAST_NAMES = (
    "Allen", "Berners-Lee", "Dijkstra", "Hamilton", "Hopper", "Johnson",
    "Kernighan", "Knuth", "Lamarr", "Liskov", "Lovelace", "Perlman",
    "Ritchie", "Shannon", "Thompson", "Turing", "Wirth",
)

SEED_ROLES = ("user", "user", "user", "admin", "admin", "admin")


def random_name() -> str:
    return f"{secrets.choice(FIRST_NAMES)} {secrets.choice(LAST_NAMES)}"


def random_password(digits: int = 8) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(digits))


class UserService:
    """Business logic for users."""

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def list_users(self) -> list[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at, User.id)
        )
        return list(result.scalars().all())

    async def get_user(self, user_id: uuid.UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def create_user(self, name: str, password: str, role: str = "user") -> User:
        user = User(
            name=name,
            role=role,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
        )
        self.db.add(user)
        await self.db.commit()
        return user

    async def seed_users(self) -> list[tuple[User, str]]:
        """Insert three users and three admins with random credentials.

        Returns (user, plaintext password) pairs.
        """
        seeded = []
        for role in SEED_ROLES:
            password = random_password()
            user = User(
                name=random_name(),
                role=role,
                password_hash=hash_password(password, rounds=self.bcrypt_rounds),
            )
            self.db.add(user)
            seeded.append((user, password))
        await self.db.commit()
        logger.info("users.seeded", count=len(seeded))
        return seeded

    async def upgrade_password(self, user: User, password: str) -> None:
        """Replace a legacy stored password with a bcrypt hash."""
        user.password_hash = hash_password(password, rounds=self.bcrypt_rounds)
        await self.db.commit()
        logger.info("user.password_upgraded", user_id=str(user.id))
