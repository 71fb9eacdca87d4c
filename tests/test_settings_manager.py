"""Tests for the settings manager."""

import json
from pathlib import Path

import pytest

from ssh_launch.config.manager import SettingsManager, create_backup, default_settings_path
from ssh_launch.config.schema import AppSettings, HostSettings


class TestSettingsManager:

    @pytest.fixture
    def home(self, tmp_path):
        path = tmp_path / 'home'
        path.mkdir()
        return path

    @pytest.fixture
    def settings_path(self, tmp_path):
        return tmp_path / 'settings' / 'settings.json'

    @pytest.fixture
    def manager(self, settings_path, home):
        return SettingsManager(settings_path, home=home)

    def write(self, path, data):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data))


class TestLoad(TestSettingsManager):

    def test_missing_file_writes_defaults(self, manager, settings_path, home):
        settings = manager.load()
        assert settings_path.exists()
        written = json.loads(settings_path.read_text())
        assert written['Paths']['SSHConfig'] == '{HOME}/.ssh/config'
        assert written['Defaults']['Port'] == 22
        assert set(written) == {'Paths', 'HostDescriptions', 'Defaults', 'PerHostSettings'}
        assert settings.paths.ssh_config == f'{home}/.ssh/config'
        assert settings.defaults.port == 22

    def test_empty_file_regenerated(self, manager, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text('   \n')
        settings = manager.load()
        assert settings.defaults.port == 22
        assert json.loads(settings_path.read_text())['Defaults']['Port'] == 22

    def test_corrupted_json_regenerated_with_backup(self, manager, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text('not valid json{{{')
        settings = manager.load()
        assert isinstance(settings, AppSettings)
        backups = list(settings_path.parent.glob('settings.json.bak.*'))
        assert len(backups) == 1
        assert backups[0].read_text() == 'not valid json{{{'
        assert json.loads(settings_path.read_text())['Defaults']['Port'] == 22

    @pytest.mark.parametrize('document', [
        [],
        {'Paths': 'nope'},
        {'Defaults': {'Port': 'abc'}},
        {'Defaults': {'Port': True}},
        {'Defaults': {'Port': 22.7}},
        {'Defaults': {'Port': 70000}},
        {'PerHostSettings': {'web': {'Port': 0}}},
        {'PerHostSettings': {'web': 5}},
    ])
    def test_malformed_document_regenerated(self, manager, settings_path, document):
        self.write(settings_path, document)
        settings = manager.load()
        assert settings.defaults.port == 22
        assert settings.per_host == {}

    def test_full_document(self, manager, settings_path, home):
        self.write(settings_path, {
            'Paths': {
                'SSHConfig': '{HOME}/custom/config',
                'SSHDir': '~/keys',
                'DefaultSSHDir': '/etc/ssh-keys',
            },
            'HostDescriptions': {'web': 'Web server'},
            'Defaults': {
                'Port': 2200,
                'PostConnectCommand': 'uptime',
                'User': 'alice',
                'WorkingDirectory': '{HOME}',
            },
            'PerHostSettings': {
                'web': {'Port': '2222', 'User': 'deploy'},
            },
        })
        settings = manager.load()
        assert settings.paths.ssh_config == f'{home}/custom/config'
        assert settings.paths.ssh_dir == f'{home}/keys'
        assert settings.paths.default_ssh_dir == '/etc/ssh-keys'
        assert settings.host_descriptions == {'web': 'Web server'}
        assert settings.defaults == HostSettings(
            port=2200, user='alice', post_connect_command='uptime',
            working_directory=str(home),
        )
        assert settings.per_host['web'] == HostSettings(port=2222, user='deploy')

    def test_missing_sections_use_defaults(self, manager, settings_path, home):
        self.write(settings_path, {'Defaults': {'User': 'bob'}})
        settings = manager.load()
        assert settings.defaults.user == 'bob'
        assert settings.defaults.port == 22
        assert settings.defaults.post_connect_command == ''
        assert settings.paths.ssh_dir == f'{home}/.ssh'

    def test_whole_number_ports_accepted(self, manager, settings_path):
        self.write(settings_path, {
            'Defaults': {'Port': 2200.0},
            'PerHostSettings': {'web': {'Port': ' 2222 '}},
        })
        settings = manager.load()
        assert settings.defaults.port == 2200
        assert settings.per_host['web'].port == 2222

    def test_valid_file_not_rewritten(self, manager, settings_path):
        self.write(settings_path, {'Defaults': {'User': 'bob'}})
        before = settings_path.read_text()
        manager.load()
        assert settings_path.read_text() == before

    def test_get_caches_settings(self, manager):
        assert manager.get() is manager.get()


class TestValidate(TestSettingsManager):

    def test_invalid_port(self, manager):
        settings = AppSettings(per_host={'web': HostSettings(port=99999)})
        warnings = manager._validate(settings)
        assert any('port' in w.lower() and 'web' in w for w in warnings)

    def test_missing_working_directory(self, manager, tmp_path):
        settings = AppSettings()
        settings.defaults.working_directory = str(tmp_path / 'nope')
        warnings = manager._validate(settings)
        assert any('WorkingDirectory' in w for w in warnings)

    def test_empty_override(self, manager):
        settings = AppSettings(per_host={'web': HostSettings()})
        warnings = manager._validate(settings)
        assert any('overrides nothing' in w for w in warnings)

    def test_missing_ssh_config(self, manager, tmp_path):
        settings = AppSettings()
        settings.paths.ssh_config = str(tmp_path / 'missing')
        assert any('SSHConfig' in w for w in manager._validate(settings))


class TestHelpers:

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv('SSH_LAUNCH_SETTINGS', str(tmp_path / 'x.json'))
        assert default_settings_path() == tmp_path / 'x.json'

    def test_default_location(self, monkeypatch):
        monkeypatch.delenv('SSH_LAUNCH_SETTINGS', raising=False)
        assert default_settings_path() == Path.home() / '.ssh-launch' / 'settings.json'

    def test_backup_missing_file(self, tmp_path):
        assert create_backup(tmp_path / 'missing.json') is None
