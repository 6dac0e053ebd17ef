"""
Schema Inference

Guesses table relationships and display fields from raw record dumps.
Nothing here knows about drawing; input is the JSON object served by the
graph-data endpoint, output is plain table metadata.

The foreign-key heuristic: a field named ``<x>_id``
references whichever table the index maps ``x`` (or ``xs``, or ``x`` minus a
trailing ``s``) to. Index keys are claimed by the first table that produces
them, so ambiguous schemas resolve by the key order of the input object.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PALETTE = [
    '#60a5fa', '#818cf8', '#34d399', '#f472b6', '#fbbf24', '#fb923c', '#38bdf8',
    '#a3e635', '#ef4444', '#c084fc', '#14b8a6', '#e879f9', '#f59e0b', '#22d3ee',
    '#6ee7b7', '#f87171', '#a78bfa', '#fdba74', '#67e8f9', '#86efac', '#fca5a5',
    '#d8b4fe', '#fcd34d', '#5eead4', '#93c5fd', '#bef264', '#fb7185', '#7dd3fc',
]

NAME_FIELD_PRIORITY = (
    'name', 'title', 'label', 'display_name', 'username', 'slug', 'email', 'description',
)

# Never used as a fallback name field
NAME_FIELD_SKIP = ('id', 'created_at', 'updated_at')

MAX_NAME_LENGTH = 80


@dataclass
class TableInfo:
    """Detected metadata for one non-empty table."""
    key: str
    label: str
    color: str
    records: List[Dict[str, Any]]
    name_field: str
    fk_fields: List[str] = field(default_factory=list)
    fk_targets: Dict[str, str] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.records)


def prettify_name(name: str) -> str:
    """``order_items`` -> ``Order Items``"""
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), name.replace('_', ' '))


def table_entries(data: Dict[str, Any]) -> List[str]:
    """Keys of ``data`` whose value is a list holding at least one record, in input order."""
    return [
        key for key, value in data.items()
        if isinstance(value, list) and any(isinstance(r, dict) for r in value)
    ]


def build_table_index(table_names: List[str]) -> Dict[str, str]:
    """Map lowercase name variants to the table that claimed them first."""
    index = {}
    for name in table_names:
        lower = name.lower()
        variants = [lower, re.sub(r'\s+', '_', lower)]
        if name.endswith('s'):
            variants.append(name[:-1].lower())
        if name.endswith('es'):
            variants.append(name[:-2].lower())
        for variant in variants:
            index.setdefault(variant, name)
    return index


def resolve_fk_target(field_name: str, index: Dict[str, str]) -> Optional[str]:
    """Return the table a ``*_id`` field points at, or None."""
    if field_name == 'id' or not field_name.endswith('_id'):
        return None
    prefix = field_name[:-len('_id')].lower()
    for candidate in (prefix, prefix + 's', re.sub(r's$', '', prefix)):
        target = index.get(candidate)
        if target:
            return target
    return None


def detect_name_field(fields: List[str], sample: Dict[str, Any]) -> str:
    """Pick the field used to label records of a table."""
    for preferred in NAME_FIELD_PRIORITY:
        if preferred in fields:
            return preferred
    for name in fields:
        if name in NAME_FIELD_SKIP:
            continue
        value = sample.get(name)
        if isinstance(value, str) and 0 < len(value) < MAX_NAME_LENGTH:
            return name
    return 'id'


def detect_tables(data: Dict[str, Any]) -> Dict[str, TableInfo]:
    """
    Build table metadata for every non-empty table in ``data``.

    The first record of each table stands in for its schema. Colours are
    assigned cyclically from PALETTE by table position.
    """
    names = table_entries(data)
    index = build_table_index(names)
    tables = {}

    for i, key in enumerate(names):
        records = [r for r in data[key] if isinstance(r, dict)]
        sample = records[0]
        fields = list(sample.keys())

        fk_fields = []
        fk_targets = {}
        for name in fields:
            target = resolve_fk_target(name, index)
            if target:
                fk_fields.append(name)
                fk_targets[name] = target

        tables[key] = TableInfo(
            key=key,
            label=prettify_name(key),
            color=PALETTE[i % len(PALETTE)],
            records=records,
            name_field=detect_name_field(fields, sample),
            fk_fields=fk_fields,
            fk_targets=fk_targets,
        )

    return tables
