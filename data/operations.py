"""
Operation Request Models

Typed request structs for the bulk moderation operations. Each is built from
an untrusted input map with from_input(), which runs the field validator
before construction.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Tuple

from data.models import ImportParams, PostRef
from utils.validation import validate_fields, parse_string, parse_selection

IMPORT_FIELDS = {
    'db_name': {'required': True, 'type': 'string', 'min_len': 1, 'max_len': 256},
    'db_user': {'required': True, 'type': 'string', 'min_len': 1, 'max_len': 256},
    'db_pass': {'required': True, 'type': 'string', 'max_len': 256},
    'table_name': {'required': True, 'type': 'string', 'min_len': 1, 'max_len': 256},
    'table_type': {'required': True, 'type': 'string', 'min_len': 1, 'max_len': 64},
    'board_id': {'required': False, 'type': 'string', 'max_len': 64},
    'db_host': {'required': False, 'type': 'string', 'max_len': 256},
}

REBUILD_FIELDS = {
    'board_id': {'required': True, 'type': 'string', 'min_len': 1, 'max_len': 64},
}

SELECTION_FIELDS = {
    'select': {'required': True, 'type': 'array'},
}


@dataclass
class ImportRequest:
    params: ImportParams

    @classmethod
    def from_input(cls, data: Mapping[str, Any]) -> "ImportRequest":
        validate_fields(data, IMPORT_FIELDS)
        return cls(ImportParams(
            db_name=data['db_name'],
            db_user=data['db_user'],
            db_pass=data['db_pass'],
            table_name=data['table_name'],
            table_type=data['table_type'],
            board_id=parse_string(data, 'board_id', default=''),
            db_host=parse_string(data, 'db_host', default='localhost'),
        ))


@dataclass
class RebuildRequest:
    board_id: str

    @classmethod
    def from_input(cls, data: Mapping[str, Any]) -> "RebuildRequest":
        validate_fields(data, REBUILD_FIELDS)
        return cls(board_id=data['board_id'])


@dataclass
class SelectionRequest:
    """A batch of "{board_id}/{post_id}" tokens, kept in wire form for logging."""
    tokens: Tuple[str, ...]

    @property
    def refs(self) -> List[PostRef]:
        return [parse_selection(token) for token in self.tokens]

    @classmethod
    def from_tokens(cls, tokens) -> "SelectionRequest":
        return cls(tuple(str(token) for token in tokens))

    @classmethod
    def from_input(cls, data: Mapping[str, Any]) -> "SelectionRequest":
        validate_fields(data, SELECTION_FIELDS)
        return cls.from_tokens(data['select'])
