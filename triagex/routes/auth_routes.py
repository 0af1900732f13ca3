# triagex/routes/auth_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Body, status
from sqlalchemy.orm import Session

from triagex.db.session import get_db
from triagex.models.user import User
from triagex.auth.deps import get_current_user
from triagex.auth.jwt import verify_password, create_access_token, hash_password
from triagex.auth.schemas import AuthResponse, UserCreate, UserLogin, UserOut

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("triagex")


def _auth_payload(user: User, message: str) -> dict:
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return {
        "success": True,
        "message": message,
        "data": {"token": token, "user": UserOut.model_validate(user)},
    }


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate = Body(...), db: Session = Depends(get_db)):
    """Create a new user account and return a token so the client is signed in."""
    email = str(payload.email).lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists")

    user = User(
        name=payload.name,
        email=email,
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info({"function": "register", "status": "created", "user_id": str(user.id)})
    return _auth_payload(user, "User registered successfully")


@router.post("/login", response_model=AuthResponse)
def login(payload: UserLogin = Body(...), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == str(payload.email).lower()).first()
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _auth_payload(user, "Login successful")


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
