from pydantic import BaseModel


class PinLogin(BaseModel):
    pin: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
