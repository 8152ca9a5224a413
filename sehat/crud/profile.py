from sqlalchemy.orm import Session

from sehat.core.security import UserContext
from sehat.db.models.profile import Profile


def get_profile(db: Session, user: UserContext) -> Profile | None:
    return db.get(Profile, user.user_id)
