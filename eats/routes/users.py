from fastapi import APIRouter, Depends

from eats.routes.auth import get_users_service
from eats.schemas.common import CoreOutput
from eats.schemas.user import EditProfileInput, UserProfileOutput
from eats.services.auth import require_roles
from eats.services.users import UsersService

router = APIRouter(prefix="/users", tags=["Users"])


@router.put("/me", response_model=CoreOutput)
def edit_profile(payload: EditProfileInput, current_user=Depends(require_roles("Any")),
                 service: UsersService = Depends(get_users_service)):
    return service.edit_profile(current_user.id, email=payload.email, password=payload.password)


@router.get("/{user_id}", response_model=UserProfileOutput)
def user_profile(user_id: int, current_user=Depends(require_roles("Any")),
                 service: UsersService = Depends(get_users_service)):
    return service.find_by_id(user_id)
