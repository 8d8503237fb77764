from typing import Any


def empty_marker(*path: str) -> str:
    """Placeholder shown for a field that is absent or not a scalar."""
    return f"<no proper {'->'.join(path)}>"


def scalar_to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError(f"Not a JSON scalar: {type(value).__name__}")


def get_as_string(obj: Any, *path: str) -> str:
    """
    Get a (nested) field of a JSON object as string.

    Walks ``path`` through nested objects and renders the leaf scalar. Any
    missing key, null, non-object parent or non-scalar leaf yields the empty
    marker naming the full path instead of raising.
    """
    current = obj
    try:
        for field in path:
            if not isinstance(current, dict):
                raise TypeError("parent is not an object")
            current = current[field]
        return scalar_to_string(current)
    except (KeyError, TypeError):
        return empty_marker(*path)


def get_as_float(obj: Any, field: str):
    value = obj.get(field) if isinstance(obj, dict) else None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def get_as_list(obj: Any, field: str) -> list:
    value = obj.get(field) if isinstance(obj, dict) else None
    return value if isinstance(value, list) else []
