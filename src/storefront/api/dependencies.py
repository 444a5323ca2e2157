"""Request identity.

Authentication happens upstream. The gateway forwards the authenticated
user's id in the ``X-User-Id`` header and these dependencies trust it.
"""

from fastapi import Depends, Header, HTTPException
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.accounts.user import User
from storefront.shared.errors import ForbiddenError
from storefront.utils.logging import add_context


async def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    add_context(user_id=x_user_id)
    return x_user_id


async def current_user(user_id: str = Depends(current_user_id)) -> User:
    return current_domain.repository_for(User).get(user_id)


async def require_admin(user_id: str = Depends(current_user_id)) -> User:
    try:
        user = current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        raise ForbiddenError({"_entity": ["Administrator access required"]}) from None

    if not user.is_admin:
        raise ForbiddenError({"_entity": ["Administrator access required"]})
    return user
