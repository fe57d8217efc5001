"""
Authentication endpoints.

``POST /login`` exchanges an e‑mail and password for a bearer token;
``POST /logout`` revokes every token of the authenticated user.
"""

import logging

from fastapi import APIRouter, Depends

from event_management_api.app.core.errors import ValidationError
from event_management_api.app.core.security import Actor, create_access_token, get_current_user, revoke_tokens
from event_management_api.app.schemas.user import LoginRequest, MessageResponse, TokenResponse
from event_management_api.app.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest) -> TokenResponse:
    """Authenticate a user and return a new access token.

    Unknown e‑mails and wrong passwords produce the same 422 response.
    Tokens issued earlier remain valid.
    """
    user = await UserService.authenticate(credentials.email, credentials.password)
    if not user:
        logger.info("Failed login for %s", credentials.email)
        raise ValidationError({"email": ["The provided credentials are incorrect."]})
    token = create_access_token(user.id)
    logger.info("User %s logged in", user.id)
    return TokenResponse(token=token)


@router.post("/logout", response_model=MessageResponse)
async def logout(actor: Actor = Depends(get_current_user)) -> MessageResponse:
    """Revoke all tokens of the authenticated user."""
    revoked = revoke_tokens(actor.id)
    logger.info("User %s logged out with token %s, %s token(s) revoked", actor.id, actor.token_id, revoked)
    return MessageResponse(message="Logged out successfully")
