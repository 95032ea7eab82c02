from pydantic import BaseModel, StrictInt, StrictStr

class TokenClaims(BaseModel):
    sub: StrictStr  # user_id
    company: StrictStr
    exp: StrictInt  # 만료 시각 (epoch seconds)

class TokenRequest(BaseModel):
    user_id: str
    company: str

class TokenResponse(BaseModel):
    token: str
