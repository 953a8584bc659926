import logging
from typing import List, Optional
from supabase import Client

logger = logging.getLogger(__name__)

QUIZ_LIST_COLUMNS = "id,user_id,course_id,title,questions,deadline,completed,score,current_index,created_at"


class QuizRepository:
    def __init__(self, client: Client) -> None:
        self.client = client

    def list_quizzes(self, user_id: str, completed: Optional[bool] = None) -> List[dict]:
        query = (
            self.client.table("quizzes")
            .select(QUIZ_LIST_COLUMNS)
            .eq("user_id", user_id)
        )
        if completed is not None:
            query = query.eq("completed", completed)
        res = query.order("created_at", desc=True).execute()
        return res.data or []

    def get_quiz(self, quiz_id: str) -> Optional[dict]:
        # maybe_single() leaves data empty instead of raising on zero rows
        res = (
            self.client.table("quizzes")
            .select("*")
            .eq("id", quiz_id)
            .maybe_single()
            .execute()
        )
        if res is None or not res.data:
            return None
        return res.data

    def create_quiz(self, row: dict) -> dict:
        # insert returns the new row as representation; no .select() afterwards
        res = self.client.table("quizzes").insert(row).execute()
        if not res.data or not isinstance(res.data, list) or "id" not in res.data[0]:
            raise RuntimeError("Insert into quizzes failed: no returned id")
        logger.info("Created quiz %s for user %s", res.data[0]["id"], row.get("user_id"))
        return res.data[0]

    def update_quiz_fields(self, quiz_id: str, fields: dict) -> None:
        """Partial update: columns not in ``fields`` keep their stored value."""
        if not fields:
            return
        self.client.table("quizzes").update(fields).eq("id", quiz_id).execute()
