import logging

from sqlalchemy.orm import Session

from eats.models.user import User, UserRole, Verification
from eats.schemas.common import CoreOutput
from eats.schemas.user import LoginOutput, UserProfileOutput, UserRead
from eats.services import auth as auth_service
from eats.services.mail import MailService

logger = logging.getLogger("eats.users")


class UsersService:
    def __init__(self, db: Session, mail: MailService):
        self.db = db
        self.mail = mail

    def create_account(self, email: str, password: str, role: UserRole) -> CoreOutput:
        try:
            if self.db.query(User).filter(User.email == email).first():
                return CoreOutput(ok=False, error="There is a user with that email already.")
            user = User(email=email, password=auth_service.get_password_hash(password), role=role)
            self.db.add(user)
            verification = Verification(user=user)
            self.db.add(verification)
            self.db.commit()
            self.mail.send_verification_email(user.email, verification.code)
            logger.info(f"account created id={user.id} role={user.role.value}")
            return CoreOutput(ok=True)
        except Exception:
            self.db.rollback()
            logger.exception("create_account failed")
            return CoreOutput(ok=False, error="Couldn't create an account.")

    def login(self, email: str, password: str) -> LoginOutput:
        try:
            user = self.db.query(User).filter(User.email == email).first()
            if not user:
                return LoginOutput(ok=False, error="User not found")
            if not auth_service.verify_password(password, user.password):
                return LoginOutput(ok=False, error="Wrong password.")
            return LoginOutput(ok=True, token=auth_service.create_access_token(user.id))
        except Exception:
            logger.exception("login failed")
            return LoginOutput(ok=False, error="Could not log in")

    def find_by_id(self, user_id: int) -> UserProfileOutput:
        try:
            user = self.db.query(User).filter(User.id == user_id).first()
            if not user:
                return UserProfileOutput(ok=False, error="User not found")
            return UserProfileOutput(ok=True, user=UserRead.model_validate(user))
        except Exception:
            logger.exception("find_by_id failed")
            return UserProfileOutput(ok=False, error="User not found")

    def edit_profile(self, user_id: int, email: str = None, password: str = None) -> CoreOutput:
        try:
            user = self.db.query(User).filter(User.id == user_id).first()
            if user is None:
                return CoreOutput(ok=False, error="User not found")
            if password:
                user.password = auth_service.get_password_hash(password)
            verification = None
            if email:
                used = self.db.query(User).filter(User.email == email).first()
                if used:
                    return CoreOutput(ok=False, error="Email is already in use")
                self.db.query(Verification).filter(Verification.user_id == user.id).delete()
                user.email = email
                user.verified = False
                verification = Verification(user=user)
                self.db.add(verification)
            self.db.add(user)
            self.db.commit()
            if verification is not None:
                self.mail.send_verification_email(user.email, verification.code)
            return CoreOutput(ok=True)
        except Exception:
            self.db.rollback()
            logger.exception("edit_profile failed")
            return CoreOutput(ok=False, error="Edit profile failed")

    def verify_email(self, code: str) -> CoreOutput:
        try:
            verification = self.db.query(Verification).filter(Verification.code == code).first()
            if not verification:
                return CoreOutput(ok=False, error="Verification failed")
            verification.user.verified = True
            self.db.add(verification.user)
            self.db.delete(verification)
            self.db.commit()
            return CoreOutput(ok=True)
        except Exception:
            self.db.rollback()
            logger.exception("verify_email failed")
            return CoreOutput(ok=False, error="Could not verify email")
