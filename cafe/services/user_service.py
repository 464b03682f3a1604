from sqlalchemy.orm import Session
from cafe.data.models.user import UserModel
from cafe.repos.user_repo import UserRepo
from cafe.domain.schemas import UserCreate, UserRead


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.id)
        if existing:
            return UserRead.model_validate(existing)

        if self.repo.get_user_by_email(payload.email):
            raise ValueError("Email already registered")

        user = UserModel(
            id=payload.id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
        )
        created = self.repo.create_user(user)
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise LookupError(f"User {user_id} not found")
        return UserRead.model_validate(user)
