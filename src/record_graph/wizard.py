"""
Interactive setup wizard

    1. Connect to a Xano workspace
    2. Discover its database tables
    3. Let the operator choose which tables to include
    4. Deploy the graph-data and visualizer endpoints
    5. Print the visualizer URL
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .client import XanoClient
from .config import Settings
from .deploy import DeployResult, VisualizerDeployer
from .discovery import (
    fetch_tables,
    list_workspaces,
    parse_workspace_choice,
    select_tables,
    split_tables,
)
from .exceptions import SetupError, XanoAPIError

BOX_WIDTH = 55


def _box(title: str) -> List[str]:
    blank = '║' + ' ' * BOX_WIDTH + '║'
    return [
        '╔' + '═' * BOX_WIDTH + '╗',
        blank,
        '║' + title.center(BOX_WIDTH) + '║',
        blank,
        '╚' + '═' * BOX_WIDTH + '╝',
    ]


@dataclass
class Connection:
    client: XanoClient
    workspace_id: Any
    workspace_name: str


class SetupWizard:
    """Prompt-driven flow; ``input_func`` and ``echo`` are swappable for tests."""

    def __init__(self, settings: Settings, input_func: Callable[[str], str] = input,
                 echo: Callable[..., None] = print, session=None):
        self.settings = settings
        self.input_func = input_func
        self.echo = echo
        self.session = session

    def prompt(self, question: str, default: Optional[str] = None) -> str:
        display = f'{question} [{default}]: ' if default else f'{question}: '
        answer = self.input_func(display).strip()
        return answer or default or ''

    def prompt_secret(self, question: str, default: Optional[str] = None) -> str:
        """Like prompt(), but a preset value is never echoed back."""
        display = f'{question} [from environment]: ' if default else f'{question}: '
        answer = self.input_func(display).strip()
        return answer or default or ''

    def print_banner(self):
        self.echo('')
        for line in _box('Xano Record Graph — Setup Wizard'):
            self.echo(line)
        self.echo('')
        self.echo('This wizard will:')
        self.echo('  1. Connect to your Xano workspace')
        self.echo('  2. Discover all database tables')
        self.echo('  3. Let you choose which tables to include')
        self.echo('  4. Deploy a graph-data API endpoint')
        self.echo('  5. Give you the URL for the visualizer')
        self.echo('')

    def connect(self) -> Connection:
        self.echo('─── Step 1: Connect to Xano ───\n')
        self.echo('Find your credentials:')
        self.echo('  Base URL → your Xano dashboard URL (e.g. https://x1234.xano.io)')
        self.echo('  API Key  → Settings > API Keys > Metadata API\n')

        base_url = self.prompt('Xano Base URL', self.settings.base_url or None).rstrip('/')
        token = self.prompt_secret('Metadata API Key', self.settings.api_key or None)
        if not base_url or not token:
            raise SetupError('Base URL and API Key are required')

        client = XanoClient(base_url, token, rate_limit=self.settings.rate_limit,
                            session=self.session)

        self.echo('\nFetching workspaces...')
        try:
            workspaces = list_workspaces(client)
        except XanoAPIError as e:
            raise SetupError(f'Could not connect: {e}')
        if not workspaces:
            raise SetupError('No workspaces found')

        self.echo('\nAvailable workspaces:')
        for i, ws in enumerate(workspaces, 1):
            self.echo(f"  {i}. {ws.get('name') or 'Unnamed'} (id: {ws.get('id')})")
        self.echo('')

        ws = parse_workspace_choice(self.prompt('Select workspace (number)'), workspaces)
        self.echo(f"\n✓ Selected: {ws.get('name')} (id: {ws.get('id')})")
        return Connection(client=client, workspace_id=ws.get('id'), workspace_name=ws.get('name'))

    def choose_tables(self, conn: Connection) -> List[Dict[str, Any]]:
        self.echo('\n─── Step 2: Discover Tables ───\n')
        self.echo('Fetching workspace context...')

        tables = fetch_tables(conn.client, conn.workspace_id)
        if not tables:
            raise SetupError('No tables found in this workspace')

        core, queue = split_tables(tables)
        self.echo(f'\nFound {len(tables)} tables ({len(core)} core, {len(queue)} queue/system):\n')
        for i, table in enumerate(core, 1):
            self.echo(f"  {i:>2}. {table['name']}")
        if queue:
            self.echo('\n  --- Queue/System tables (excluded by default) ---')
            for table in queue:
                self.echo(f"      · {table['name']}")

        self.echo('\nOptions:')
        self.echo('  a = all core tables (recommended)')
        self.echo('  1,3,5 = specific table numbers')
        self.echo('  * = everything including queue tables\n')

        selected = select_tables(self.prompt('Include tables', 'a'), core, tables)
        self.echo(f'\n✓ Selected {len(selected)} tables:')
        for table in selected:
            self.echo(f"    · {table['name']}")
        if not selected:
            raise SetupError('No tables selected')
        return selected

    def deploy(self, conn: Connection, tables: List[Dict[str, Any]]) -> DeployResult:
        self.echo('\n─── Step 3: Deploy Endpoint ───\n')
        deployer = VisualizerDeployer(conn.client, conn.workspace_id,
                                      group_name=self.settings.api_group,
                                      per_page=self.settings.per_page, echo=self.echo)
        return deployer.deploy([t['name'] for t in tables])

    def run(self) -> Optional[str]:
        """Run every step. Returns the public visualizer URL when it could be resolved."""
        self.print_banner()
        conn = self.connect()
        tables = self.choose_tables(conn)
        result = self.deploy(conn, tables)

        self.echo('')
        for line in _box('Setup Complete! ✓'):
            self.echo(line)
        self.echo('')
        if result.public_url:
            self.echo(f'Visualizer URL: {result.public_url}')
            self.echo('')
            self.echo('Open that URL in your browser — it just works!')
        else:
            self.echo('Check the Xano dashboard for the visualizer endpoint URL.')
        self.echo('')
        return result.public_url
