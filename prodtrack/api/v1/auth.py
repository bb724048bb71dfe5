from fastapi import APIRouter, HTTPException

from ... import schemas
from ...auth import create_access_token, pin_gate_enabled
from ...config.settings import settings
from ...security import verify_pin

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=schemas.Token)
def login_with_pin(body: schemas.PinLogin):
    """用访问 PIN 换取令牌"""
    if not pin_gate_enabled():
        raise HTTPException(status_code=400, detail="Access PIN is not configured")
    if not verify_pin(body.pin, settings.ACCESS_PIN):
        raise HTTPException(status_code=401, detail="Wrong PIN")
    return {"access_token": create_access_token({"sub": "admin"}), "token_type": "bearer"}
