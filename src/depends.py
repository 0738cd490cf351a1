from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import verify_jwt
from src.domain.status_transitions import StatusTransitionPolicy

security = HTTPBearer(auto_error=False)


def build_engine(db_uri: str) -> AsyncEngine:
    return create_async_engine(db_uri, echo=False, future=True)


def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


async def get_unit_of_work(request: Request):
    """Open a session from the factory the app was built with"""
    session_factory = request.app.state.session_factory
    config = request.app.state.config
    async with session_factory() as session:
        yield SqlAlchemyUnitOfWork(session, append_max_retries=config.APPEND_MAX_RETRIES)


def get_status_policy(request: Request) -> StatusTransitionPolicy:
    return StatusTransitionPolicy(
        enforce=request.app.state.config.ENFORCE_STATUS_TRANSITIONS
    )


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Tokens are issued by the identity service; this service only checks
    the signature and expiry and hands the claims to the route.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload (contains user_id)

    Raises:
        HTTPException: 401 if token is missing, invalid or expired
    """
    config = request.app.state.config
    if config.AUTH_DISABLED:
        return {"user_id": None}

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided",
        )

    payload = verify_jwt(
        credentials.credentials,
        secret=config.JWT_SECRET,
        algorithm=config.JWT_ALGORITHM,
    )

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload
