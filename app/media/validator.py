import json
import os
from functools import lru_cache
from typing import Any, Dict, Tuple

from jsonschema import validate, ValidationError

# Path: app/media/schemas/
SCHEMA_DIR = os.path.join(
    os.path.dirname(__file__),
    "schemas"
)

EXTRACTED_RECORD_SCHEMA = "extracted_record.json"


@lru_cache(maxsize=None)
def load_schema(filename: str = EXTRACTED_RECORD_SCHEMA) -> Dict[str, Any]:
    """
    Load a bundled JSON schema file.
    """
    path = os.path.join(SCHEMA_DIR, filename)

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_candidate(data: Any) -> Tuple[bool, str]:
    """
    Check that a parsed model response has the shape of an extracted record.

    Returns:
        (True, "") if valid
        (False, "<error message>") if invalid
    """
    try:
        validate(instance=data, schema=load_schema())
        return True, ""
    except ValidationError as e:
        return False, e.message
