"""
Unit tests for releasesweep.config input sources.
"""

import json
import logging

import pytest

from releasesweep.config import (
    ActionInputSource,
    ChainedInputSource,
    MappingInputSource,
    build_input_source,
    load_input_file,
    resolve_repository,
    setup_logging,
)
from releasesweep.exit_codes import ConfigError


class TestActionInputSource:
    """Tests for GitHub Actions style inputs."""

    def test_reads_upper_cased_input_variable(self):
        source = ActionInputSource({'INPUT_PREFIX': 'develop-'})
        assert source.get_input('prefix') == 'develop-'

    def test_keeps_hyphens(self):
        source = ActionInputSource({'INPUT_MAX-AGE': 'P2W', 'INPUT_KEEP-LATEST-RELEASES': 'true'})
        assert source.get_input('max-age') == 'P2W'
        assert source.get_input('keep-latest-releases') == 'true'

    def test_spaces_become_underscores(self):
        source = ActionInputSource({'INPUT_MY_INPUT': 'x'})
        assert source.get_input('my input') == 'x'

    def test_trims_whitespace(self):
        source = ActionInputSource({'INPUT_DRY-RUN': '  true\n'})
        assert source.get_input('dry-run') == 'true'

    def test_missing_is_empty(self):
        assert ActionInputSource({}).get_input('regex') == ''


class TestMappingInputSource:
    """Tests for dictionary-backed inputs."""

    def test_none_is_empty(self):
        assert MappingInputSource({'prefix': None}).get_input('prefix') == ''

    def test_booleans_become_strings(self):
        source = MappingInputSource({'dry-run': True, 'delete-tags': False})
        assert source.get_input('dry-run') == 'true'
        assert source.get_input('delete-tags') == 'false'

    def test_numbers_become_strings(self):
        assert MappingInputSource({'prefix': 2022}).get_input('prefix') == '2022'


class TestChainedInputSource:
    """Tests for input precedence."""

    def test_first_non_empty_wins(self):
        source = ChainedInputSource([
            MappingInputSource({'prefix': ''}),
            MappingInputSource({'prefix': 'nightly-'}),
            MappingInputSource({'prefix': 'develop-'}),
        ])
        assert source.get_input('prefix') == 'nightly-'

    def test_all_empty(self):
        source = ChainedInputSource([MappingInputSource({}), ActionInputSource({})])
        assert source.get_input('prefix') == ''


class TestBuildInputSource:
    """Tests for build_input_source()."""

    def test_options_override_action_inputs(self):
        source = build_input_source({'prefix': 'cli-'}, environ={'INPUT_PREFIX': 'env-'})
        assert source.get_input('prefix') == 'cli-'

    def test_action_inputs_used_when_option_unset(self):
        source = build_input_source({'prefix': None}, environ={'INPUT_PREFIX': 'env-'})
        assert source.get_input('prefix') == 'env-'

    def test_max_age_default(self):
        source = build_input_source({}, environ={})
        assert source.get_input('max-age') == 'P1W'

    def test_token_falls_back_to_github_token(self):
        source = build_input_source({}, environ={'GITHUB_TOKEN': 'from-env'})
        assert source.get_input('token') == 'from-env'

    def test_token_input_preferred_over_github_token(self):
        source = build_input_source({}, environ={'INPUT_TOKEN': 'input', 'GITHUB_TOKEN': 'from-env'})
        assert source.get_input('token') == 'input'

    def test_file_between_options_and_action_inputs(self, tmp_path):
        path = tmp_path / 'inputs.json'
        path.write_text(json.dumps({'prefix': 'file-', 'regex': 'file-regex'}))

        source = build_input_source(
            {'prefix': 'cli-'},
            config_file=path,
            environ={'INPUT_REGEX': 'env-regex', 'INPUT_DRY-RUN': 'true'},
        )

        assert source.get_input('prefix') == 'cli-'
        assert source.get_input('regex') == 'file-regex'
        assert source.get_input('dry-run') == 'true'


class TestLoadInputFile:
    """Tests for inputs files."""

    def test_yaml(self, tmp_path):
        path = tmp_path / 'inputs.yml'
        path.write_text("prefix: nightly-\nmax-age: P2W\ndelete-tags: true\n")

        source = load_input_file(path)

        assert source.get_input('prefix') == 'nightly-'
        assert source.get_input('max-age') == 'P2W'
        assert source.get_input('delete-tags') == 'true'

    def test_toml(self, tmp_path):
        path = tmp_path / 'inputs.toml'
        path.write_text('regex = "^(?<group>.*)-\\\\d+$"\n"keep-latest-releases" = true\n')

        source = load_input_file(path)

        assert source.get_input('regex') == r'^(?<group>.*)-\d+$'
        assert source.get_input('keep-latest-releases') == 'true'

    def test_json(self, tmp_path):
        path = tmp_path / 'inputs.json'
        path.write_text(json.dumps({'dry-run': 'true'}))

        assert load_input_file(path).get_input('dry-run') == 'true'

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / 'inputs.yaml'
        path.write_text('')

        assert load_input_file(path).get_input('prefix') == ''

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / 'inputs.yaml'
        path.write_text('- a\n- b\n')

        with pytest.raises(ConfigError, match='mapping'):
            load_input_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match='Cannot read'):
            load_input_file(tmp_path / 'missing.json')

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'inputs.json'
        path.write_text('{not json')

        with pytest.raises(ConfigError):
            load_input_file(path)

    def test_warns_about_unknown_keys(self, tmp_path, caplog):
        path = tmp_path / 'inputs.json'
        path.write_text(json.dumps({'prefix': 'x', 'max_age': 'P1D'}))

        with caplog.at_level(logging.WARNING, logger='releasesweep'):
            load_input_file(path)

        assert 'max_age' in caplog.text


class TestResolveRepository:
    """Tests for resolve_repository()."""

    def test_explicit(self):
        assert resolve_repository('tester/testing', environ={}) == ('tester', 'testing')

    def test_from_github_repository(self):
        assert resolve_repository(None, environ={'GITHUB_REPOSITORY': 'octo/hello'}) == ('octo', 'hello')

    def test_explicit_wins(self):
        env = {'GITHUB_REPOSITORY': 'octo/hello'}
        assert resolve_repository('tester/testing', environ=env) == ('tester', 'testing')

    def test_missing(self):
        with pytest.raises(ConfigError, match='No repository'):
            resolve_repository(None, environ={})

    @pytest.mark.parametrize('value', ['tester', 'tester/', '/testing', 'a/b/c'])
    def test_malformed(self, value):
        with pytest.raises(ConfigError, match='owner/repo'):
            resolve_repository(value, environ={})


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.usefixtures('restore_root_logger')
class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_verbose_sets_debug(self):
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_default_is_info_and_quiets_http_libraries(self):
        setup_logging(verbose=False)
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger('urllib3').level == logging.WARNING
