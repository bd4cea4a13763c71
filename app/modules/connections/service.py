from supabase import Client
from app.modules.connections.schemas import ConnectionResponse
from typing import List, Optional
from fastapi import HTTPException


class ConnectionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_by_provider(self, provider_name: str, provider_id: str) -> Optional[ConnectionResponse]:
        """Find the connection for one external identity"""
        result = self.supabase.table("connections")\
            .select("*")\
            .eq("provider_name", provider_name)\
            .eq("provider_id", provider_id)\
            .limit(1)\
            .execute()

        if not result.data:
            return None

        return ConnectionResponse(**result.data[0])

    def create(self, provider_name: str, provider_id: str, user_id: str) -> ConnectionResponse:
        """Link an external identity to a user"""
        result = self.supabase.table("connections").insert({
            "provider_name": provider_name,
            "provider_id": provider_id,
            "user_id": user_id,
        }).execute()

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create connection")

        return ConnectionResponse(**result.data[0])

    def list_for_user(self, user_id: str) -> List[ConnectionResponse]:
        result = self.supabase.table("connections")\
            .select("*")\
            .eq("user_id", user_id)\
            .order("created_at", desc=True)\
            .execute()
        return [ConnectionResponse(**row) for row in result.data or []]

    def delete_for_user(self, connection_id: str, user_id: str) -> bool:
        """Delete a connection only if it belongs to the user"""
        result = self.supabase.table("connections")\
            .delete()\
            .eq("id", connection_id)\
            .eq("user_id", user_id)\
            .execute()

        return len(result.data or []) > 0
