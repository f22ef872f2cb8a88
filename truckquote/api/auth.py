from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from truckquote.schemas.auth import RegisterIn, TokenOut
from truckquote.models.user import User
from truckquote.db.session import get_db
from truckquote.core.security import create_access_token, hash_password, verify_password
from truckquote.core.enums import UserRole, AuditAction
from truckquote.core.audit_log import log_audit

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenOut, status_code=201)
async def register(payload: RegisterIn, db: AsyncSession = Depends(get_db)):
    email = payload.email.lower()
    res = await db.execute(select(User).where(User.email == email))
    existing_user = res.scalars().first()
    if existing_user:
        raise HTTPException(status_code=400, detail="User already exists with this email")
    
    new_user = User(
        email=email,
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone=payload.phone,
        company=payload.company,
        role=UserRole.CUSTOMER,
    )
    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)
    
    await log_audit(db, int(new_user.id), AuditAction.REGISTER, {"email": email})
    
    token = create_access_token(str(new_user.id), new_user.role)
    return {"access_token": token}


@router.post("/login", response_model=TokenOut)
async def login(form_data: OAuth2PasswordRequestForm = Depends(), db: AsyncSession = Depends(get_db)):
    res = await db.execute(select(User).where(User.email == form_data.username.lower()))
    user = res.scalars().first()
    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    
    await log_audit(db, int(user.id), AuditAction.LOGIN, {"email": user.email})
    
    token = create_access_token(str(user.id), user.role)
    return {"access_token": token}
