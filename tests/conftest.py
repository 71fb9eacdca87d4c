"""Shared fixtures for SSH Launch tests."""

import pytest

from ssh_launch.config.schema import (
    AppSettings,
    HostSettings,
    PathsConfig,
)
from ssh_launch.config.store import SettingsStore


SAMPLE_SSH_CONFIG = """\
# Personal servers
Host *
    ServerAliveInterval 30

Host web www
    HostName 1.2.3.4
    User deploy

Host db
    HostName db.internal
    IdentityFile ~/.ssh/db_key
    Port 2222

Host bastion
    HostName bastion.example.com
"""


@pytest.fixture
def sample_config_text():
    return SAMPLE_SSH_CONFIG


@pytest.fixture
def ssh_dir(tmp_path):
    """Empty primary key directory."""
    path = tmp_path / 'ssh'
    path.mkdir()
    return path


@pytest.fixture
def fallback_dir(tmp_path):
    """Empty fallback key directory."""
    path = tmp_path / 'fallback'
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path, ssh_dir, fallback_dir):
    """AppSettings pointing at temp directories."""
    return AppSettings(
        paths=PathsConfig(
            ssh_config=str(tmp_path / 'ssh_config'),
            ssh_dir=str(ssh_dir),
            default_ssh_dir=str(fallback_dir),
        ),
        host_descriptions={'web': 'Production web server'},
        defaults=HostSettings(
            port=22,
            user='alice',
            post_connect_command='',
            working_directory='',
        ),
        per_host={
            'web': HostSettings(port=2222, user='www-admin'),
            'db': HostSettings(post_connect_command='tmux attach'),
        },
    )


@pytest.fixture
def store(settings):
    return SettingsStore(settings)
