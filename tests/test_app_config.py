import argparse
import os
import pytest
from unittest.mock import patch
from helpers.app_config import build_config, env_var_name, load_environment, parse_duration, resolve_option
from helpers.errors import ConfigurationError


def make_args(token=None, group=None, url_prefix=None, timeout=None):
    return argparse.Namespace(token=token, group=group, url_prefix=url_prefix, timeout=timeout)


class TestEnvVarName:

    def test_simple_flag(self):
        assert env_var_name('token') == 'GITLAB_CLI_TOKEN'

    def test_dashed_flag(self):
        assert env_var_name('url-prefix') == 'GITLAB_CLI_URL_PREFIX'


class TestParseDuration:

    @pytest.mark.parametrize('text, seconds', [
        ('10s', 10.0),
        ('1m30s', 90.0),
        ('1.5s', 1.5),
        ('250ms', 0.25),
        ('2h', 7200.0),
        ('15', 15.0),
        (' 3s ', 3.0),
    ])
    def test_valid_durations(self, text, seconds):
        assert parse_duration(text) == pytest.approx(seconds)

    @pytest.mark.parametrize('text', ['', 'abc', '10x', 's', '10s junk', 'inf'])
    def test_invalid_durations(self, text):
        with pytest.raises(ConfigurationError):
            parse_duration(text)

    def test_negative_duration(self):
        assert parse_duration('-5s') == -5.0


class TestResolveOption:

    def test_command_line_wins(self):
        assert resolve_option('cli', 'group', {'GITLAB_CLI_GROUP': 'env'}) == 'cli'

    def test_environment_fills_unset_flag(self):
        assert resolve_option(None, 'group', {'GITLAB_CLI_GROUP': 'env'}) == 'env'

    def test_empty_environment_is_unset(self):
        assert resolve_option(None, 'group', {'GITLAB_CLI_GROUP': ''}) is None

    def test_nothing_set(self):
        assert resolve_option(None, 'group', {}) is None


class TestBuildConfig:

    def test_from_command_line(self):
        config = build_config(make_args('tok', 'grp', 'https://gitlab.example.com', '30s'), environ={})

        assert config.token == 'tok'
        assert config.group == 'grp'
        assert config.url_prefix == 'https://gitlab.example.com'
        assert config.timeout == 30.0

    def test_from_environment(self):
        environ = {
            'GITLAB_CLI_TOKEN': 'tok',
            'GITLAB_CLI_GROUP': 'grp',
            'GITLAB_CLI_URL_PREFIX': 'https://gitlab.example.com',
            'GITLAB_CLI_TIMEOUT': '1m',
        }

        config = build_config(make_args(), environ=environ)

        assert config.token == 'tok'
        assert config.group == 'grp'
        assert config.url_prefix == 'https://gitlab.example.com'
        assert config.timeout == 60.0

    def test_command_line_overrides_environment(self):
        environ = {'GITLAB_CLI_TOKEN': 'env-tok', 'GITLAB_CLI_GROUP': 'env-grp', 'GITLAB_CLI_URL_PREFIX': 'https://env'}

        config = build_config(make_args(group='cli-grp'), environ=environ)

        assert config.group == 'cli-grp'
        assert config.token == 'env-tok'

    def test_default_timeout(self):
        config = build_config(make_args('tok', 'grp', 'https://gitlab.example.com'), environ={})
        assert config.timeout == 10.0

    @pytest.mark.parametrize('missing, message', [
        ('url_prefix', '--url-prefix must be specified'),
        ('group', '--group must be specified'),
        ('token', '--token must be specified'),
    ])
    def test_missing_required_option(self, missing, message):
        values = {'token': 'tok', 'group': 'grp', 'url_prefix': 'https://gitlab.example.com'}
        values[missing] = None

        with pytest.raises(ConfigurationError, match=message):
            build_config(make_args(**values), environ={})

    def test_url_prefix_reported_first(self):
        with pytest.raises(ConfigurationError, match='--url-prefix must be specified'):
            build_config(make_args(), environ={})

    def test_empty_command_line_value_is_missing(self):
        with pytest.raises(ConfigurationError, match='--token must be specified'):
            build_config(make_args('', 'grp', 'https://gitlab.example.com'), environ={})

    @pytest.mark.parametrize('timeout', ['0s', '-1s', 'soon'])
    def test_bad_timeout(self, timeout):
        with pytest.raises(ConfigurationError):
            build_config(make_args('tok', 'grp', 'https://gitlab.example.com', timeout), environ={})

    @patch.dict(os.environ, {'GITLAB_CLI_TOKEN': 'os-tok', 'GITLAB_CLI_GROUP': 'os-grp', 'GITLAB_CLI_URL_PREFIX': 'https://os'})
    def test_defaults_to_process_environment(self):
        config = build_config(make_args())
        assert config.token == 'os-tok'
        assert config.url_prefix == 'https://os'


class TestLoadEnvironment:

    @patch.dict(os.environ, {'GITLAB_CLI_GROUP': 'already-set'})
    def test_dotenv_does_not_override(self, tmp_path):
        dotenv_file = tmp_path / '.env'
        dotenv_file.write_text('GITLAB_CLI_GROUP=from-file\nGITLAB_CLI_TOKEN=file-token\n')

        assert load_environment(str(dotenv_file)) is True
        assert os.environ['GITLAB_CLI_GROUP'] == 'already-set'
        assert os.environ['GITLAB_CLI_TOKEN'] == 'file-token'
