"""
Visualizer Deployer
===================

Creates (or reuses) the API group and publishes the graph-data and
visualizer endpoints into a workspace.

Usage:
    from record_graph.client import XanoClient
    from record_graph.deploy import VisualizerDeployer

    client = XanoClient('https://x1234.xano.io', token)
    deployer = VisualizerDeployer(client, workspace_id=1)
    result = deployer.deploy(['users', 'orders'])
    print(result.public_url)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .client import XanoClient, list_items
from .config import DEFAULT_API_GROUP, DEFAULT_PER_PAGE
from .exceptions import SetupError, XanoAPIError
from .page import render_visualizer_html
from .xanoscript import (
    GRAPH_DATA_ENDPOINT,
    VISUALIZER_ENDPOINT,
    api_group_script,
    graph_data_script,
    visualizer_script,
)

logger = logging.getLogger(__name__)

CREATED = 'created'
UPDATED = 'updated'
FAILED = 'failed'


@dataclass
class DeployResult:
    api_group_id: Any
    endpoints: Dict[str, str] = field(default_factory=dict)
    public_url: Optional[str] = None


class VisualizerDeployer:
    """Publish the visualizer endpoints into one workspace."""

    def __init__(self, client: XanoClient, workspace_id, group_name: str = DEFAULT_API_GROUP,
                 per_page: int = DEFAULT_PER_PAGE, echo=print):
        """
        Args:
            client: Authenticated meta API client
            workspace_id: Target workspace
            group_name: API group holding both endpoints
            per_page: Records fetched per table by graph-data
            echo: Progress output (print by default)
        """
        self.client = client
        self.workspace_id = workspace_id
        self.group_name = group_name
        self.per_page = per_page
        self.echo = echo

    @property
    def ws_path(self) -> str:
        return f'/workspace/{self.workspace_id}'

    def find_api_group(self) -> Optional[Any]:
        """Id of the existing API group, or None. Listing errors count as "not found"."""
        try:
            groups = list_items(self.client.get(f'{self.ws_path}/apigroup'))
        except XanoAPIError as e:
            logger.warning("Could not list API groups: %s", e)
            return None
        for group in groups:
            if group.get('name') == self.group_name:
                return group.get('id')
        return None

    def ensure_api_group(self) -> Any:
        self.echo('Checking for existing API group...')
        group_id = self.find_api_group()
        if group_id is not None:
            self.echo(f'  ⚠ "{self.group_name}" API group already exists (id: {group_id})')
            return group_id

        self.echo(f'Creating "{self.group_name}" API group...')
        try:
            result = self.client.post_script(f'{self.ws_path}/apigroup',
                                             api_group_script(self.group_name))
        except XanoAPIError as e:
            raise SetupError(f'Failed to create API group: {e}')
        group_id = (result or {}).get('id')
        if group_id is None:
            raise SetupError('Failed to create API group: no id returned')
        self.echo(f'  ✓ Created (id: {group_id})')
        return group_id

    def _find_api(self, group_id, name: str) -> Optional[Dict[str, Any]]:
        apis = list_items(self.client.get(f'{self.ws_path}/apigroup/{group_id}/api'))
        for api in apis:
            if name in (api.get('name') or ''):
                return api
        return None

    def deploy_endpoint(self, group_id, script: str, name: str) -> str:
        """
        Create an endpoint, updating it in place when it already exists.

        Failures are reported and returned as FAILED rather than raised, so
        one broken endpoint does not stop the other from deploying.
        """
        api_path = f'{self.ws_path}/apigroup/{group_id}/api'
        try:
            self.client.post_script(api_path, script)
            self.echo(f'  ✓ {name} deployed')
            return CREATED
        except XanoAPIError as e:
            if 'already exists' not in str(e):
                self.echo(f'  ✗ Failed to deploy {name}: {e}')
                return FAILED
            self.echo(f'  ⚠ {name} already exists — updating...')

        try:
            existing = self._find_api(group_id, name)
            if existing is None:
                self.echo(f'  ⚠ Could not find existing {name} to update')
                return FAILED
            self.client.put_script(f"{api_path}/{existing['id']}", script)
        except XanoAPIError as e:
            self.echo(f'  ⚠ Could not auto-update {name}: {e}')
            return FAILED
        self.echo(f'  ✓ {name} updated')
        return UPDATED

    def resolve_public_url(self, group_id) -> Optional[str]:
        details = self.client.get(f'{self.ws_path}/apigroup/{group_id}') or {}
        canonical = details.get('canonical')
        if not canonical:
            return None
        return f'{self.client.base_url}/api:{canonical}/{VISUALIZER_ENDPOINT}'

    def deploy(self, table_names: List[str]) -> DeployResult:
        """
        Deploy both endpoints for the given tables.

        Returns:
            DeployResult with per-endpoint outcome and the public visualizer
            URL (None when the group has no canonical id).
        """
        group_id = self.ensure_api_group()
        result = DeployResult(api_group_id=group_id)

        self.echo('Deploying graph-data endpoint...')
        result.endpoints[GRAPH_DATA_ENDPOINT] = self.deploy_endpoint(
            group_id, graph_data_script(table_names, self.per_page), GRAPH_DATA_ENDPOINT)

        self.echo('Deploying visualizer HTML endpoint...')
        result.endpoints[VISUALIZER_ENDPOINT] = self.deploy_endpoint(
            group_id, visualizer_script(render_visualizer_html()), VISUALIZER_ENDPOINT)

        self.echo('\nResolving public URL...')
        result.public_url = self.resolve_public_url(group_id)
        if result.public_url is None:
            self.echo('  ⚠ Could not determine canonical ID from API group')
            self.echo('  Check the Xano dashboard for the endpoint URL')
        return result
