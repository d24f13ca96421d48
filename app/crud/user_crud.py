from sqlalchemy.orm import Session
from app.models.user.user_model import User
from typing import Optional

def get_user(db: Session, user_id: int) -> Optional[User]:
    """
    Fetch a user by primary key.

    Args:
        db: The database session.
        user_id: Identifier of the user to look up.

    Returns:
        The User if found, otherwise None.
    """
    return db.get(User, user_id)
