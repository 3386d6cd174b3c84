"""Document id helpers."""
from bson import ObjectId
from bson.errors import InvalidId

from worklog.errors import NotFound


def to_object_id(value: str, label: str) -> ObjectId:
    """
    Parse a hex document id.

    Malformed ids are reported like unknown ones, so callers cannot tell a
    typo from a foreign-owned document.

    Raises:
        NotFound: If the value is not a valid ObjectId
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise NotFound(f"{label} not found")
