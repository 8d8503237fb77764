import uuid

AUTOMATIC_SESSION_ID = "<automatic>"


def new_session_id() -> str:
    return str(uuid.uuid4())


def normalize_session_id(value) -> str:
    raw = (value or "").strip()
    if not raw or raw == AUTOMATIC_SESSION_ID:
        return new_session_id()
    return raw
