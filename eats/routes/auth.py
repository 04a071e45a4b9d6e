from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eats.db.session import get_db
from eats.schemas.common import CoreOutput
from eats.schemas.user import CreateAccountInput, LoginInput, LoginOutput, UserRead, VerifyEmailInput
from eats.services import auth as auth_service
from eats.services.mail import MailService, get_mail_service
from eats.services.users import UsersService

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_users_service(db: Session = Depends(get_db), mail: MailService = Depends(get_mail_service)):
    return UsersService(db, mail)


@router.post("/register", response_model=CoreOutput)
def register(user_in: CreateAccountInput, service: UsersService = Depends(get_users_service)):
    return service.create_account(user_in.email, user_in.password, user_in.role)


@router.post("/login", response_model=LoginOutput)
def login(form_data: LoginInput, service: UsersService = Depends(get_users_service)):
    return service.login(form_data.email, form_data.password)


@router.get("/me", response_model=UserRead)
def read_users_me(current_user=Depends(auth_service.require_roles("Any"))):
    return current_user


@router.post("/verify", response_model=CoreOutput)
def verify_email(payload: VerifyEmailInput, service: UsersService = Depends(get_users_service)):
    return service.verify_email(payload.code)
