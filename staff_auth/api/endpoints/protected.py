# staff-auth/staff_auth/api/endpoints/protected.py
from fastapi import APIRouter, Depends

from staff_auth.api.deps import get_protected_claims
from staff_auth.core.errors import Messages
from staff_auth.schemas import token as token_schema

router = APIRouter()


@router.get("/protected", response_model=token_schema.ProtectedResponse)
def read_protected(claims: token_schema.TokenClaims = Depends(get_protected_claims)):
    return {"message": Messages.PROTECTED.value, "userId": claims.user_id, "role": claims.role}
