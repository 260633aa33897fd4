from datetime import date, datetime
import pytz
from library_ledger.config import settings

def local_zone(name: str = None):
    """Timezone used for the lending calendar (defaults to the configured one)."""
    return pytz.timezone(name or settings.timezone)

def now_local(name: str = None) -> datetime:
    """Get current datetime in the library's timezone."""
    return datetime.now(local_zone(name))

def today_local(name: str = None) -> date:
    """Get the current calendar date in the library's timezone."""
    return now_local(name).date()
