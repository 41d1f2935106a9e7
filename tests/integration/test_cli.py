import json
import os

import pytest
import yaml
from click.testing import CliRunner

from liteenv.CLI.main import cli

FIXTURE = os.path.join(os.path.dirname(__file__), "..", "fixture", "test.env")


@pytest.fixture
def clean_env(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("NAME=demo\nPORT=8080\nRATIO=0.5\nDEBUG=true\nNOTHING=null\n")
    return str(env_file)


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'load .env files' in result.output


def test_cli_get():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', FIXTURE, 'get', 'LOG_FILE'])
    assert result.exit_code == 0
    assert result.output.splitlines()[-1] == '/home/user/logs/app.log'


def test_cli_get_typed_value():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', FIXTURE, 'get', 'ENABLE_CACHE'])
    assert result.exit_code == 0
    assert result.output.splitlines()[-1] == 'true'


def test_cli_get_missing_key():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', FIXTURE, 'get', 'NON_EXISTENT_KEY_12345'])
    assert result.exit_code == 1
    result = runner.invoke(cli, ['-f', FIXTURE, 'get', 'NON_EXISTENT_KEY_12345', '--default', 'fallback'])
    assert result.exit_code == 0
    assert result.output.splitlines()[-1] == 'fallback'


def test_cli_get_invalid_key():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', FIXTURE, 'get', 'kebab-case'])
    assert result.exit_code == 2
    assert 'Invalid key format' in result.output


def test_cli_has():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', FIXTURE, 'has', 'DATABASE_NAME'])
    assert result.exit_code == 0
    assert 'yes' in result.output
    result = runner.invoke(cli, ['-f', FIXTURE, 'has', 'NON_EXISTENT_KEY_12345'])
    assert result.exit_code == 1


def test_cli_missing_file():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', 'non_existent.env', 'keys'])
    assert result.exit_code == 1
    assert 'Error: The file "non_existent.env" does not exist' in result.output


def test_cli_keys_later_files_win(clean_env, tmp_path):
    override = tmp_path / "override.env"
    override.write_text("NAME=override\nEXTRA=1\n")
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', clean_env, '-f', str(override), 'keys'])
    assert result.exit_code == 0
    assert result.output.split() == ['NAME', 'PORT', 'RATIO', 'DEBUG', 'NOTHING', 'EXTRA']
    result = runner.invoke(cli, ['-f', clean_env, '-f', str(override), 'get', 'NAME'])
    assert result.output.strip() == 'override'


def test_cli_dump_env(clean_env):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', clean_env, 'dump'])
    assert result.exit_code == 0
    assert 'PORT=8080' in result.output.splitlines()
    assert 'DEBUG=true' in result.output.splitlines()


def test_cli_dump_json(clean_env):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', clean_env, 'dump', '--format', 'json'])
    assert result.exit_code == 0
    assert json.loads(result.output) == {
        'NAME': 'demo', 'PORT': 8080, 'RATIO': 0.5, 'DEBUG': True, 'NOTHING': None,
    }


def test_cli_dump_yaml(clean_env):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', clean_env, 'dump', '-o', 'yaml'])
    assert result.exit_code == 0
    assert yaml.safe_load(result.output) == {
        'NAME': 'demo', 'PORT': 8080, 'RATIO': 0.5, 'DEBUG': True, 'NOTHING': None,
    }


def test_cli_check_reports_errors():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', FIXTURE, 'check'])
    assert result.exit_code == 1
    assert 'Missing equals sign' in result.output
    assert '3 errors' in result.output


def test_cli_check_clean_file(clean_env):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', clean_env, 'check'])
    assert result.exit_code == 0
    assert '5 entries, 0 errors' in result.output


def test_cli_strict_unterminated(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text('A=1\nB="never closed\n')
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', str(env_file), '--strict', 'keys'])
    assert result.exit_code == 1
    assert 'Unterminated' in result.output
    result = runner.invoke(cli, ['-f', str(env_file), 'keys'])
    assert result.exit_code == 0
    assert result.output.split() == ['A']


def test_cli_file_from_environment(clean_env):
    runner = CliRunner()
    result = runner.invoke(cli, ['get', 'NAME'], env={'LITEENV_FILE': clean_env})
    assert result.exit_code == 0
    assert result.output.strip() == 'demo'


def test_cli_file_from_environment_with_spaces(tmp_path):
    folder = tmp_path / "my configs"
    folder.mkdir()
    base = folder / "base env.env"
    override = folder / "override.env"
    base.write_text("NAME=base\nPORT=1\n")
    override.write_text("NAME=override\n")
    runner = CliRunner()
    result = runner.invoke(cli, ['get', 'NAME'], env={'LITEENV_FILE': str(base)})
    assert result.exit_code == 0
    assert result.output.strip() == 'base'

    paths = os.pathsep.join([str(base), str(override)])
    result = runner.invoke(cli, ['keys'], env={'LITEENV_FILE': paths})
    assert result.exit_code == 0
    assert result.output.split() == ['NAME', 'PORT']
    result = runner.invoke(cli, ['get', 'NAME'], env={'LITEENV_FILE': paths})
    assert result.output.strip() == 'override'
