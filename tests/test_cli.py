"""CLI tests through Typer's test runner."""
from typer.testing import CliRunner

from component_extractor import __version__
from component_extractor.main import app

runner = CliRunner()


def test_extract(react_app, tmp_path):
    output = tmp_path / 'out'

    result = runner.invoke(app, ['extract', 'Login', '--project', str(react_app), '--output', str(output)])

    assert result.exit_code == 0, result.output
    assert 'Extraction complete' in result.output
    assert (output / 'src/pages/Login.jsx').exists()
    assert (output / 'package.json').exists()


def test_extract_page_with_manifest(react_app, tmp_path):
    output = tmp_path / 'out'

    result = runner.invoke(app, ['extract-page', 'Login', '-p', str(react_app), '-o', str(output), '--manifest'])

    assert result.exit_code == 0, result.output
    assert (output / 'extraction-manifest.json').exists()


def test_missing_component_exits_with_error(react_app, tmp_path):
    result = runner.invoke(app, ['extract', 'Sidebar', '-p', str(react_app), '-o', str(tmp_path / 'out')])

    assert result.exit_code == 1
    assert 'Component not found: Sidebar' in result.output
    assert not (tmp_path / 'out').exists()


def test_missing_project_exits_with_error(tmp_path):
    result = runner.invoke(app, ['extract', 'Login', '-p', str(tmp_path / 'nowhere')])
    assert result.exit_code == 1


def test_dry_run(react_app, tmp_path):
    output = tmp_path / 'out'

    result = runner.invoke(app, ['extract', 'Login', '-p', str(react_app), '-o', str(output), '--dry-run'])

    assert result.exit_code == 0, result.output
    assert 'DRY RUN' in result.output
    assert not output.exists()


def test_list(react_app):
    result = runner.invoke(app, ['list', '-p', str(react_app)])

    assert result.exit_code == 0, result.output
    assert 'Login' in result.output
    assert 'UserCard' in result.output


def test_list_pages_only(react_app):
    result = runner.invoke(app, ['list', '-p', str(react_app), '--kind', 'pages'])

    assert result.exit_code == 0, result.output
    assert 'Login' in result.output
    assert 'UserCard' not in result.output


def test_version():
    result = runner.invoke(app, ['--version'])

    assert result.exit_code == 0
    assert __version__ in result.output
