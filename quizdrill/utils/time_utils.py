from datetime import datetime
import pytz

def get_utc_time():
    """Get current time in UTC"""
    return datetime.now(pytz.UTC)

def ensure_utc(dt):
    """Attach UTC to naive datetimes read back from storage"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)
