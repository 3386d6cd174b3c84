"""Authentication service - business logic for user auth."""
import logging
from datetime import datetime
from typing import Callable

from pymongo.errors import DuplicateKeyError

from worklog.errors import EmailTaken, InvalidCredentials, NotFound
from worklog.models.user import User
from worklog.utils.auth import create_access_token, hash_password, verify_password
from worklog.utils.datetime_format import utc_now
from worklog.utils.ids import to_object_id

logger = logging.getLogger(__name__)


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, db, clock: Callable[[], datetime] = utc_now):
        """Initialize service with database connection."""
        self.db = db
        self.clock = clock
        self.users = db["users"]

    async def register_user(self, email: str, password: str, name: str) -> User:
        """
        Register a new user.

        Args:
            email: User email address (stored lowercased)
            password: Plain text password
            name: User's name

        Returns:
            User object (without password)

        Raises:
            EmailTaken: If the email already has an account
        """
        email = email.lower()

        existing = await self.users.find_one({"email": email})
        if existing:
            raise EmailTaken("Email already registered")

        now = self.clock()
        user_doc = {
            "email": email,
            "hashed_password": hash_password(password),
            "name": name,
            "created_at": now,
            "updated_at": now,
        }

        try:
            result = await self.users.insert_one(user_doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration
            raise EmailTaken("Email already registered")
        logger.info("Registered user %s", result.inserted_id)

        return User(
            _id=str(result.inserted_id),
            email=email,
            name=name,
            created_at=now,
            updated_at=now,
        )

    async def login(self, email: str, password: str) -> str:
        """
        Check credentials and return an access token.

        Raises:
            InvalidCredentials: On unknown email or wrong password
        """
        user_doc = await self.users.find_one({"email": email.lower()})
        if not user_doc or not verify_password(password, user_doc["hashed_password"]):
            raise InvalidCredentials("Invalid email or password")

        return create_access_token(user_id=str(user_doc["_id"]))

    async def get_user_by_id(self, user_id: str) -> User:
        """
        Get user by ID.

        Raises:
            NotFound: If user not found
        """
        user_doc = await self.users.find_one({"_id": to_object_id(user_id, "User")})
        if not user_doc:
            raise NotFound("User not found")

        return User(
            _id=str(user_doc["_id"]),
            email=user_doc["email"],
            name=user_doc["name"],
            created_at=user_doc["created_at"],
            updated_at=user_doc["updated_at"],
        )
