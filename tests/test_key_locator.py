"""Tests for key discovery."""

import builtins
import os

import pytest

from ssh_launch.services.key_locator import (
    KeyLocator,
    MAX_SNIFF_BYTES,
    PRIVATE_KEY_MARKER,
)

PRIVATE_KEY = (
    PRIVATE_KEY_MARKER.decode()
    + "\nb3BlbnNzaC1rZXktdjEAAAAABG5vbmUAAAAEbm9uZQAAAAAAAAAB\n"
    + "-----END OPENSSH PRIVATE KEY-----\n"
)


class TestKeyLocator:

    @pytest.fixture
    def locator(self):
        return KeyLocator()


class TestFindKeys(TestKeyLocator):

    def test_name_heuristics(self, locator, ssh_dir):
        (ssh_dir / 'id_rsa').write_text('x')
        (ssh_dir / 'id_ed25519').write_text('x')
        (ssh_dir / 'server.key').write_text('x')
        keys = locator.find_keys([ssh_dir])
        assert [os.path.basename(k) for k in keys] == ['id_ed25519', 'id_rsa', 'server.key']

    def test_excludes_public_config_and_known_hosts(self, locator, ssh_dir):
        (ssh_dir / 'id_rsa.pub').write_text(PRIVATE_KEY)
        (ssh_dir / 'config').write_text(PRIVATE_KEY)
        (ssh_dir / 'known_hosts').write_text(PRIVATE_KEY)
        assert locator.find_keys([ssh_dir]) == []

    def test_exclusion_is_case_sensitive(self, locator, ssh_dir):
        (ssh_dir / 'Config').write_text(PRIVATE_KEY)
        keys = locator.find_keys([ssh_dir])
        assert [os.path.basename(k) for k in keys] == ['Config']

    def test_small_file_with_marker_included(self, locator, ssh_dir):
        content = PRIVATE_KEY + 'A' * (2 * 1024 - len(PRIVATE_KEY))
        (ssh_dir / 'cred').write_text(content)
        keys = locator.find_keys([ssh_dir])
        assert keys == [str(ssh_dir / 'cred')]

    def test_small_file_without_marker_excluded(self, locator, ssh_dir):
        (ssh_dir / 'notes').write_text('just some notes')
        assert locator.find_keys([ssh_dir]) == []

    def test_file_at_size_limit_is_read(self, locator, ssh_dir):
        content = PRIVATE_KEY + 'A' * (MAX_SNIFF_BYTES - len(PRIVATE_KEY))
        (ssh_dir / 'limit').write_text(content)
        assert len(locator.find_keys([ssh_dir])) == 1

    def test_large_file_never_opened(self, locator, ssh_dir, monkeypatch):
        (ssh_dir / 'notes.txt').write_text(PRIVATE_KEY + 'A' * (50 * 1024))
        (ssh_dir / 'id_rsa').write_bytes(os.urandom(64 * 1024))
        opened = []
        real_open = builtins.open

        def tracking_open(file, *args, **kwargs):
            opened.append(os.path.basename(str(file)))
            return real_open(file, *args, **kwargs)

        monkeypatch.setattr(builtins, 'open', tracking_open)
        keys = locator.find_keys([ssh_dir])

        assert [os.path.basename(k) for k in keys] == ['id_rsa']
        assert opened == []

    def test_directories_are_skipped(self, locator, ssh_dir):
        (ssh_dir / 'id_dir').mkdir()
        assert locator.find_keys([ssh_dir]) == []

    def test_missing_directory_skipped(self, locator, ssh_dir, tmp_path):
        (ssh_dir / 'id_rsa').write_text('x')
        keys = locator.find_keys([tmp_path / 'missing', ssh_dir, None, ''])
        assert keys == [str(ssh_dir / 'id_rsa')]

    def test_no_directories(self, locator):
        assert locator.find_keys([]) == []

    def test_deduplicates_across_directories(self, locator, ssh_dir):
        (ssh_dir / 'id_rsa').write_text('x')
        keys = locator.find_keys([ssh_dir, str(ssh_dir), ssh_dir / '.'])
        assert keys == [str(ssh_dir / 'id_rsa')]

    def test_merges_directories_sorted(self, locator, ssh_dir, fallback_dir):
        (fallback_dir / 'id_a').write_text('x')
        (ssh_dir / 'id_b').write_text('x')
        keys = locator.find_keys([ssh_dir, fallback_dir])
        assert keys == sorted([str(fallback_dir / 'id_a'), str(ssh_dir / 'id_b')])

    def test_paths_are_absolute(self, locator, ssh_dir, monkeypatch):
        (ssh_dir / 'id_rsa').write_text('x')
        monkeypatch.chdir(ssh_dir.parent)
        keys = locator.find_keys([ssh_dir.name])
        assert len(keys) == 1
        assert os.path.isabs(keys[0])
        assert os.path.realpath(keys[0]) == os.path.realpath(ssh_dir / 'id_rsa')

    def test_idempotent(self, locator, ssh_dir, fallback_dir):
        (ssh_dir / 'id_rsa').write_text('x')
        (fallback_dir / 'cred').write_text(PRIVATE_KEY)
        (fallback_dir / 'notes').write_text('hello')
        first = locator.find_keys([ssh_dir, fallback_dir])
        second = locator.find_keys([ssh_dir, fallback_dir])
        assert first == second
        assert len(first) == 2


class TestBufferZeroing(TestKeyLocator):

    class FakeHandle:

        def __init__(self, buffers, payload=None):
            self.buffers = buffers
            self.payload = payload

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return False

        def readinto(self, buffer):
            self.buffers.append(buffer)
            if self.payload is None:
                raise OSError("read failed")
            buffer[:len(self.payload)] = self.payload
            return len(self.payload)

    @pytest.fixture
    def key_file(self, ssh_dir):
        path = ssh_dir / 'cred'
        path.write_text(PRIVATE_KEY)
        return path

    def test_buffer_zeroed_after_marker_found(self, locator, key_file, monkeypatch):
        buffers = []
        monkeypatch.setattr(
            builtins, 'open',
            lambda *args, **kwargs: self.FakeHandle(buffers, PRIVATE_KEY.encode())
        )

        assert locator._contains_marker(key_file) is True
        assert len(buffers) == 1
        assert len(buffers[0]) == MAX_SNIFF_BYTES + 1
        assert not any(buffers[0])

    def test_buffer_zeroed_after_read_error(self, locator, key_file, monkeypatch):
        buffers = []
        monkeypatch.setattr(
            builtins, 'open',
            lambda *args, **kwargs: self.FakeHandle(buffers)
        )

        assert locator._contains_marker(key_file) is False
        assert len(buffers) == 1
        assert not any(buffers[0])
