"""Tests for the launch session wiring."""

import subprocess
from unittest.mock import MagicMock

import pytest

from ssh_launch.exceptions import ConfigNotFound
from ssh_launch.services.ssh_service import SSHService
from ssh_launch.session import LaunchSession


class TestLaunchSession:

    @pytest.fixture
    def runner(self):
        return MagicMock(return_value=subprocess.CompletedProcess(args=[], returncode=0))

    @pytest.fixture
    def session(self, settings, sample_config_text, runner):
        with open(settings.paths.ssh_config, 'w') as f:
            f.write(sample_config_text)
        return LaunchSession(settings, ssh_service=SSHService(runner=runner))

    def test_start_parses_and_consolidates(self, session, settings, ssh_dir, fallback_dir):
        (fallback_dir / 'known_hosts').write_text('web ssh-rsa KEY\n')
        hosts = session.start()
        assert [h.alias for h in hosts] == ['web', 'db', 'bastion']
        assert hosts[0].description == 'Production web server'
        assert session.known_hosts_file == ssh_dir / 'known_hosts'
        assert (ssh_dir / 'known_hosts').read_text() == 'web ssh-rsa KEY\n'

    def test_missing_config(self, settings, tmp_path):
        session = LaunchSession(settings, config_path=str(tmp_path / 'nope'))
        with pytest.raises(ConfigNotFound):
            session.start()

    def test_hosts_is_a_copy(self, session):
        session.start()
        session.hosts.clear()
        assert len(session.hosts) == 3

    def test_connect_passes_known_hosts(self, session, runner, ssh_dir):
        hosts = session.start()
        session.connect(hosts[1])
        cmd = runner.call_args.args[0]
        assert f'UserKnownHostsFile={ssh_dir / "known_hosts"}' in cmd
        assert cmd[-1] == 'tmux attach'
        assert cmd[-2] == 'alice@db.internal'
