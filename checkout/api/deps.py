# checkout/api/deps.py
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from checkout.data.database import get_db
from checkout.repos.user_repo import UserRepo


def get_current_user_id(
    x_user_id: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> str:
    """
    Sesja/uwierzytelnienie rozwiązuje gateway przed serwisem i przekazuje X-User-Id.
    Tutaj tylko sprawdzamy, czy taki użytkownik istnieje.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    if not UserRepo(db).get_user(x_user_id):
        raise HTTPException(status_code=401, detail="Unauthorized")

    return x_user_id
