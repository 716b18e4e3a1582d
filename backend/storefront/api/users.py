import logging

from fastapi import APIRouter, Depends, Response

from storefront.api.auth import UserResponse
from storefront.api.deps import get_user_store, require_roles
from storefront.auth import Claims
from storefront.models.user import Role
from storefront.store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

require_admin = require_roles(Role.admin)


@router.get("", response_model=list[UserResponse])
def list_users(
    store: UserStore = Depends(get_user_store),
    _admin: Claims = Depends(require_admin),
):
    return store.list_all()


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    store: UserStore = Depends(get_user_store),
    admin: Claims = Depends(require_admin),
):
    store.delete_by_id(user_id)
    logger.info(f"User {user_id} deleted by {admin.subject_id}")
    return Response(status_code=204)
