"""
Status record validation.

Every record crossing the store boundary, read or written, is checked against
the bundled status_record.schema.json.
"""

import json
from functools import lru_cache
from pathlib import Path

from jsonschema.exceptions import best_match
from jsonschema.validators import validator_for

SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "status_record.schema.json"


class ValidationError(Exception):
    """A status record does not match the schema."""

    def __init__(self, message: str, field: str = None, path: Path | None = None):
        self.field = field
        self.path = path
        where = f" at {field}" if field else ""
        source = f" in {path}" if path else ""
        super().__init__(f"invalid status record{source}: {message}{where}")


@lru_cache(maxsize=1)
def _record_validator():
    schema = json.loads(SCHEMA_PATH.read_text())
    validator_cls = validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def validate_record(data: dict, path: Path | None = None) -> None:
    """
    Validate a status record dict.

    Args:
        data: Record as stored on disk
        path: File the record was read from or is about to be written to

    Raises:
        ValidationError: on the first schema violation found
    """
    error = best_match(_record_validator().iter_errors(data))
    if error is not None:
        field = ".".join(str(p) for p in error.absolute_path) or "(root)"
        raise ValidationError(error.message, field, path)
