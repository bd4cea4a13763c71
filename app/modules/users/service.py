from supabase import Client
from app.modules.users.schemas import UserResponse
from typing import Optional


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user_by_email(self, email: str) -> Optional[UserResponse]:
        """Get user by email, ignoring case (emails are stored lower-cased)"""
        result = self.supabase.table("users")\
            .select("*")\
            .eq("email", email.lower())\
            .limit(1)\
            .execute()

        if not result.data:
            return None

        return UserResponse(**result.data[0])
