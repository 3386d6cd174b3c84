"""Auth router - registration, login and the current-user dependency."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from worklog.database import get_database
from worklog.errors import WorklogError
from worklog.models.user import AccessToken, LoginRequest, User, UserCreate
from worklog.services.auth_service import AuthService
from worklog.utils.auth import verify_access_token


router = APIRouter(prefix="/auth", tags=["auth"])
bearer = HTTPBearer(auto_error=False)

UNAUTHENTICATED_HEADERS = {"WWW-Authenticate": "Bearer"}


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> str:
    """
    Resolve the bearer token to the owner's user ID.

    Every project, entry and summary route depends on this, so all data
    access is scoped to the token's subject.

    Raises:
        HTTPException: If the token is missing, malformed or expired (401)
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=UNAUTHENTICATED_HEADERS,
        )

    try:
        return verify_access_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers=UNAUTHENTICATED_HEADERS,
        )


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(payload: UserCreate, db=Depends(get_database)):
    """
    Create an account.

    - Emails are stored lowercased and must be unique
    """
    service = AuthService(db)
    try:
        return await service.register_user(
            email=payload.email,
            password=payload.password,
            name=payload.name,
        )
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.post("/login", response_model=AccessToken)
async def login(payload: LoginRequest, db=Depends(get_database)):
    """Exchange email and password for a bearer token."""
    service = AuthService(db)
    try:
        token = await service.login(email=payload.email, password=payload.password)
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    return AccessToken(access_token=token)


@router.get("/me", response_model=User)
async def me(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """The account behind the bearer token; 404 if it was removed."""
    service = AuthService(db)
    try:
        return await service.get_user_by_id(user_id)
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
