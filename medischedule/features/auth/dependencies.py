from typing import Callable
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from medischedule.core.security import decode_token
from medischedule.core.logging import logger
from medischedule.database import get_store
from medischedule.features.auth.schemas import TokenIdentity
from medischedule.shared.exceptions import CredentialsException, ForbiddenException
from medischedule.shared.schemas import Actor, Role
from medischedule.store import DocumentStore


# HTTP Bearer security scheme
security = HTTPBearer()


async def get_token_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> TokenIdentity:
    """
    Dependency to get the identity behind a bearer token.
    
    Used on its own by signup, where no profile exists yet.
    
    Raises:
        CredentialsException: If the token is invalid
    """
    payload = decode_token(credentials.credentials)
    if payload is None:
        raise CredentialsException("Invalid authentication credentials")
    
    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Token missing 'sub' field")
        raise CredentialsException("Invalid authentication credentials")
    
    return TokenIdentity(id=user_id, email=payload.get("email"))


async def get_current_actor(
    identity: TokenIdentity = Depends(get_token_identity),
    store: DocumentStore = Depends(get_store),
) -> Actor:
    """
    Dependency to get the acting user with their role.
    
    Raises:
        CredentialsException: If the profile is missing or deactivated
    """
    profile = await store.get("users", identity.id)
    if profile is None:
        raise CredentialsException("User profile not found. Complete signup first.")
    
    if not profile.isActive:
        logger.warning(f"Inactive user attempted access: {identity.id}")
        raise CredentialsException("Inactive user")
    
    return Actor(id=profile.id, email=profile.email, role=profile.role)


def require_roles(*allowed: Role) -> Callable:
    """
    Dependency factory enforcing role-based access.
    
    Usage: Depends(require_roles("admin"))
    """
    
    async def checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in allowed:
            raise ForbiddenException("Insufficient permissions")
        return actor
    
    return checker
