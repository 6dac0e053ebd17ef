"""
XanoScript generation

Source text for the two endpoints and the API group the wizard deploys.
"""

import re
from typing import List

from .config import DEFAULT_PER_PAGE

GRAPH_DATA_ENDPOINT = 'graph-data'
VISUALIZER_ENDPOINT = 'visualizer'


def table_key(name: str) -> str:
    """Key a table's records are returned under: lowercase, spaces to underscores."""
    return re.sub(r'\s+', '_', name.lower())


def script_key(key: str) -> str:
    # Keys with hyphens and the like would parse as arithmetic unless quoted
    return key if re.fullmatch(r'[a-z0-9_]+', key) else f'"{key}"'


def escape_string(text: str) -> str:
    """Body of a double-quoted XanoScript literal; always a single line."""
    return (
        text.replace('\\', '\\\\')
        .replace('"', '\\"')
        .replace('\r\n', '\n')
        .replace('\r', '\n')
        .replace('\n', '\\n')
    )


def graph_data_script(table_names: List[str], per_page: int = DEFAULT_PER_PAGE) -> str:
    """GET endpoint returning ``{table_key: [records...]}`` for the chosen tables."""
    query_blocks = '\n\n'.join(
        f'''    db.query "{escape_string(name)}" {{
      return = {{
        type  : "list"
        paging: {{page: 1, per_page: {per_page}, metadata: false}}
      }}
    }} as $t{i}'''
        for i, name in enumerate(table_names)
    )
    result_entries = '\n'.join(
        f'        {script_key(table_key(name))}: $t{i}' for i, name in enumerate(table_names)
    )
    return f'''query "{GRAPH_DATA_ENDPOINT}" verb=GET {{
  description = "Returns records from all tables for the graph visualizer"

  input {{
  }}

  stack {{
{query_blocks}

    var $result {{
      value = {{
{result_entries}
      }}
    }}
  }}

  response = $result
  history = false
}}'''


def visualizer_script(page_html: str) -> str:
    """GET endpoint serving the visualizer page as text/html."""
    return f'''query "{VISUALIZER_ENDPOINT}" verb=GET {{
  description = "Serves the interactive graph visualizer HTML page"

  input {{
  }}

  stack {{
    util.set_header {{
      value = "Content-Type: text/html; charset=utf-8"
      duplicates = "replace"
    }}

    var $html {{
      value = "{escape_string(page_html)}"
    }}
  }}

  response = $html
  history = false
}}'''


def api_group_script(name: str) -> str:
    return f'api_group "{escape_string(name)}" {{ swagger = {{active: true}} }}'
