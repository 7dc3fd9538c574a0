from fastapi import APIRouter, Depends, Response, status

from .. import schemas
from ..dependencies import get_current_user, get_user_service, require_admin
from ..models import User
from ..services.users import UserService

router = APIRouter(tags=["users"])


@router.post("/login")
def login(req: schemas.LoginRequest, users: UserService = Depends(get_user_service)):
    return users.login(req.user_id, req.password)


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return user.public_dict()


@router.post("/users/set-password", response_model=schemas.MessageResponse)
def set_password(
    req: schemas.SetPasswordRequest,
    user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    users.set_password(user.user_id, req.new_password)
    return {"message": "Password updated successfully."}


@router.get("/users")
def list_users(_: User = Depends(require_admin), users: UserService = Depends(get_user_service)):
    return users.list()


@router.post("/users/create", status_code=status.HTTP_201_CREATED)
def create_user(
    req: schemas.UserCreateRequest,
    _: User = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return users.create(req.payload())


@router.put("/users/{user_id}")
def update_user(
    user_id: str,
    req: schemas.UserUpdateRequest,
    _: User = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return users.update(user_id, req.payload())


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    users.delete(user_id, admin.name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
