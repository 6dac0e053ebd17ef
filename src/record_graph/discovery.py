"""
Workspace & table discovery
"""

from typing import Any, Dict, List, Tuple

from .client import XanoClient, list_items
from .exceptions import SetupError

# Tables whose name contains one of these are hidden unless asked for
QUEUE_PATTERNS = ('pagination_queue', 'process_queue', 'log')


def list_workspaces(client: XanoClient) -> List[Dict[str, Any]]:
    return list_items(client.get('/workspace'))


def parse_workspace_choice(text: str, workspaces: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Turn a 1-based menu number into a workspace."""
    try:
        choice = int(text.strip())
    except (TypeError, ValueError):
        raise SetupError('Invalid selection')
    if choice < 1 or choice > len(workspaces):
        raise SetupError('Invalid selection')
    return workspaces[choice - 1]


def fetch_tables(client: XanoClient, workspace_id) -> List[Dict[str, Any]]:
    """
    Tables of a workspace.

    The workspace context usually carries ``databaseTables`` (older instances
    use ``tables``); otherwise fall back to the table listing endpoint.
    """
    ctx = client.get(f'/workspace/{workspace_id}') or {}
    if ctx.get('databaseTables'):
        return ctx['databaseTables']
    if ctx.get('tables'):
        return ctx['tables']
    return list_items(client.get(f'/workspace/{workspace_id}/table'))


def is_queue_table(table: Dict[str, Any]) -> bool:
    name = (table.get('name') or '').lower()
    return any(p in name for p in QUEUE_PATTERNS)


def split_tables(tables: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Return (core, queue/system) tables, each in original order."""
    core = [t for t in tables if not is_queue_table(t)]
    queue = [t for t in tables if is_queue_table(t)]
    return core, queue


def select_tables(choice: str, core: List[Dict[str, Any]],
                  all_tables: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Apply the operator's table choice.

    ``*`` selects everything, ``a`` (or nothing) the core tables, and a comma
    separated list of 1-based numbers picks core tables. Numbers out of
    range or unparseable entries are ignored.
    """
    choice = choice.strip()
    if choice == '*':
        return list(all_tables)
    if choice in ('a', ''):
        return list(core)
    selected = []
    for part in choice.split(','):
        try:
            i = int(part.strip()) - 1
        except ValueError:
            continue
        if 0 <= i < len(core):
            selected.append(core[i])
    return selected
