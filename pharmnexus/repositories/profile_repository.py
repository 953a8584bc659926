from typing import Optional
from supabase import Client


class ProfileRepository:
    def __init__(self, client: Client) -> None:
        self.client = client

    def get_points(self, user_id: str) -> Optional[int]:
        res = (
            self.client.table("profiles")
            .select("points")
            .eq("id", user_id)
            .maybe_single()
            .execute()
        )
        if res is None or not res.data:
            return None
        return int(res.data.get("points") or 0)

    def set_points(self, user_id: str, points: int) -> None:
        self.client.table("profiles").update({"points": points}).eq("id", user_id).execute()
