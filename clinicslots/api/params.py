import re
from datetime import date
from clinicslots.core.errors import Validation

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

def parse_day(value: str) -> date:
    """Strict YYYY-MM-DD query parameter, rejected before any data access."""
    if not _ISO_DATE.match(value or ""):
        raise Validation("date must be in YYYY-MM-DD format", date=value)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise Validation("date is not a valid calendar date", date=value)
