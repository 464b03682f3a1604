# cafe/data/ids.py
import re
import uuid

#document-store style identifiers, 12 bytes as 24 lowercase hex chars
OBJECT_ID_PATTERN = re.compile(r"^[0-9a-f]{24}$")


def new_object_id() -> str:
    return uuid.uuid4().hex[:24]


def is_object_id(value) -> bool:
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None
