"""Tests for the interactive setup wizard."""

import pytest

from record_graph.config import Settings
from record_graph.exceptions import SetupError
from record_graph.wizard import SetupWizard

from conftest import FakeResponse, FakeSession

GROUP = '/workspace/4/apigroup/7'


def live_routes():
    return {
        ('GET', '/workspace'): FakeResponse([{'id': 4, 'name': 'Shop'}]),
        ('GET', '/workspace/4'): FakeResponse({'databaseTables': [
            {'id': 1, 'name': 'users'},
            {'id': 2, 'name': 'process_queue'},
            {'id': 3, 'name': 'orders'},
        ]}),
        ('GET', '/workspace/4/apigroup'): FakeResponse({'items': []}),
        ('POST', '/workspace/4/apigroup'): FakeResponse({'id': 7}),
        ('POST', f'{GROUP}/api'): [FakeResponse({'id': 55}), FakeResponse({'id': 56})],
        ('GET', GROUP): FakeResponse({'id': 7, 'canonical': 'abc'}),
    }


def make_wizard(answers, routes=None, **settings):
    settings.setdefault('rate_limit', 0)
    replies = iter(answers)
    prompts, output = [], []

    def answer(question):
        prompts.append(question)
        return next(replies)

    session = FakeSession(routes if routes is not None else live_routes())
    wizard = SetupWizard(Settings(**settings), input_func=answer, echo=output.append,
                         session=session)
    return wizard, session, prompts, output


def test_full_run_deploys_core_tables():
    wizard, session, prompts, output = make_wizard(['https://x1.xano.io/', 'key', '1', ''])
    url = wizard.run()

    assert url == 'https://x1.xano.io/api:abc/visualizer'
    assert prompts[-1] == 'Include tables [a]: '
    script = session.calls_to('POST', f'{GROUP}/api')[0]['body']
    assert 'db.query "users"' in script
    assert 'db.query "orders"' in script
    assert 'process_queue' not in script
    assert session.calls[0]['headers']['Authorization'] == 'Bearer key'
    assert f'Visualizer URL: {url}' in output
    assert '      · process_queue' in output


def test_prompts_default_to_settings():
    wizard, session, prompts, _ = make_wizard(['', '', '1'], base_url='https://x2.xano.io',
                                              api_key='env-key')
    conn = wizard.connect()
    assert prompts[0] == 'Xano Base URL [https://x2.xano.io]: '
    assert conn.client.base_url == 'https://x2.xano.io'
    assert conn.client.token == 'env-key'
    assert (conn.workspace_id, conn.workspace_name) == (4, 'Shop')


def test_preset_api_key_is_never_shown():
    wizard, _, prompts, output = make_wizard(['', '', '1'], base_url='https://x2.xano.io',
                                             api_key='sk-SECRET-123')
    conn = wizard.connect()
    assert conn.client.token == 'sk-SECRET-123'
    assert prompts[1] == 'Metadata API Key [from environment]: '
    assert not any('sk-SECRET-123' in text for text in prompts + output)


def test_missing_credentials():
    wizard, session, _, _ = make_wizard(['https://x1.xano.io', ''])
    with pytest.raises(SetupError, match='Base URL and API Key are required'):
        wizard.connect()
    assert session.calls == []


def test_rejected_key_reports_connection_error():
    routes = {('GET', '/workspace'): FakeResponse(status=401, text='Unauthorized')}
    wizard, _, _, _ = make_wizard(['https://x1.xano.io', 'bad'], routes)
    with pytest.raises(SetupError, match='Could not connect: .*401'):
        wizard.connect()


def test_no_workspaces():
    routes = {('GET', '/workspace'): FakeResponse({'items': []})}
    wizard, _, _, _ = make_wizard(['https://x1.xano.io', 'key'], routes)
    with pytest.raises(SetupError, match='No workspaces found'):
        wizard.connect()


def test_invalid_workspace_number():
    wizard, _, _, _ = make_wizard(['https://x1.xano.io', 'key', '5'])
    with pytest.raises(SetupError, match='Invalid selection'):
        wizard.connect()


def test_empty_table_selection_stops_before_deploy():
    wizard, session, _, _ = make_wizard(['https://x1.xano.io', 'key', '1', '9'])
    with pytest.raises(SetupError, match='No tables selected'):
        wizard.run()
    assert session.calls_to('POST', '/workspace/4/apigroup') == []


def test_workspace_without_tables():
    routes = live_routes()
    routes[('GET', '/workspace/4')] = FakeResponse({})
    routes[('GET', '/workspace/4/table')] = FakeResponse({'items': []})
    wizard, _, _, _ = make_wizard(['https://x1.xano.io', 'key', '1'], routes)
    with pytest.raises(SetupError, match='No tables found'):
        wizard.run()
