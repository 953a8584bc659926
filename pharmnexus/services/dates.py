from datetime import date, datetime, timedelta
from typing import Optional

DEFAULT_DEADLINE_DAYS = 7

def to_iso(value) -> Optional[str]:
    # Supabase returns either an ISO string or a datetime
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)

def default_deadline(today: Optional[date] = None) -> str:
    today = today or date.today()
    return (today + timedelta(days=DEFAULT_DEADLINE_DAYS)).isoformat()
