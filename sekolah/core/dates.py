from datetime import date, datetime, timezone


def normalize_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        try:
            return date.fromisoformat(value_text[:10])
        except ValueError:
            return None
    return None


def format_id_date(value) -> str:
    """Render a date the way id-ID locales do (DD/MM/YYYY), '-' when missing."""
    normalized = normalize_date(value)
    if normalized is None:
        return "-"
    return normalized.strftime("%d/%m/%Y")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
