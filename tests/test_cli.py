"""Tests for the command-line interface."""

import json

import pytest

from record_graph import cli


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, 'setup_logging', lambda verbose=False: None)
    monkeypatch.delenv('XANO_PER_PAGE', raising=False)


@pytest.fixture
def data_file(tmp_path, example_data):
    path = tmp_path / 'graph-data.json'
    path.write_text(json.dumps(example_data), encoding='utf-8')
    return path


def test_build_html_embeds_data(data_file, tmp_path, capsys):
    out = tmp_path / 'site' / 'graph.html'
    cli.main(['build', str(data_file), '--output', str(out), '--title', 'Shop'])
    page = out.read_text(encoding='utf-8')
    assert '<title>Shop</title>' in page
    assert '"Alice Moreau"' in page
    assert '✅ Generated' in capsys.readouterr().out


def test_build_svg_snapshot(data_file, tmp_path, capsys):
    out = tmp_path / 'graph.svg'
    cli.main(['build', str(data_file), '--format', 'svg', '--output', str(out),
              '--width', '800', '--height', '600'])
    svg = out.read_text(encoding='utf-8')
    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="800" height="600"')
    assert '7 tables, 20 records' in capsys.readouterr().out


def test_export_named_tables(tmp_path):
    cli.main(['export', '--tables', 'users, orders,', '--output', str(tmp_path)])
    script = (tmp_path / 'graph-data.xs').read_text(encoding='utf-8')
    assert 'db.query "users"' in script
    assert 'db.query "orders"' in script
    assert (tmp_path / 'visualizer.xs').read_text(encoding='utf-8').startswith('query "visualizer"')


def test_export_tables_from_data_file(data_file, tmp_path):
    out = tmp_path / 'xs'
    cli.main(['export', str(data_file), '--output', str(out)])
    script = (out / 'graph-data.xs').read_text(encoding='utf-8')
    assert 'db.query "api_tokens"' in script
    # empty tables carry no records to graph
    assert 'process_queue' not in script


def test_init_writes_example(tmp_path):
    cli.main(['init', '--output', str(tmp_path / 'demo')])
    data = json.loads((tmp_path / 'demo' / 'graph-data.json').read_text())
    assert len(data['users']) == 3


def test_missing_data_file_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(['build', str(tmp_path / 'nope.json')])
    assert exc.value.code == 1
    assert '❌ Error:' in capsys.readouterr().out


def test_build_requires_data_argument(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(['build'])
    assert exc.value.code == 1
    assert 'A graph-data JSON file is required' in capsys.readouterr().out


def test_non_object_payload_is_rejected(tmp_path):
    path = tmp_path / 'list.json'
    path.write_text('[1, 2]')
    with pytest.raises(SystemExit):
        cli.main(['build', str(path)])


def test_unknown_command_is_rejected():
    with pytest.raises(SystemExit) as exc:
        cli.main(['deploy'])
    assert exc.value.code == 2
