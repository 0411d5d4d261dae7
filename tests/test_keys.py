"""Tests for keyboard polling on a non-terminal stream."""

import os

import pytest

from clockit.keys import KeyReader, is_quit_key


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "r")
    yield reader, write_fd
    reader.close()
    try:
        os.close(write_fd)
    except OSError:
        pass


class TestQuitKeys:
    @pytest.mark.parametrize("key", ["q", "Q", "\x03"])
    def test_quit_keys(self, key):
        assert is_quit_key(key)

    @pytest.mark.parametrize("key", [None, "", " ", "x", "\n"])
    def test_other_keys(self, key):
        assert not is_quit_key(key)


class TestKeyReader:
    def test_nothing_pending(self, pipe):
        reader, _ = pipe
        with KeyReader(reader) as keys:
            assert keys.poll() is None

    def test_reads_pending_key(self, pipe):
        reader, write_fd = pipe
        os.write(write_fd, b"q")
        with KeyReader(reader) as keys:
            assert keys.poll(timeout=1.0) == "q"
            assert keys.poll() is None

    def test_eof_stops_polling(self, pipe):
        reader, write_fd = pipe
        os.close(write_fd)
        with KeyReader(reader) as keys:
            assert keys.poll() is None
            assert keys.poll() is None

    def test_non_tty_leaves_terminal_alone(self, pipe):
        reader, _ = pipe
        keys = KeyReader(reader)
        with keys:
            assert keys._saved_attrs is None
        keys.restore()

    def test_keys_pressed_together_are_all_delivered(self, pipe):
        reader, write_fd = pipe
        os.write(write_fd, b" q")
        with KeyReader(reader) as keys:
            assert keys.poll(timeout=1.0) == " "
            assert keys.poll() == "q"
            assert keys.poll() is None

    def test_queued_keys_survive_eof(self, pipe):
        reader, write_fd = pipe
        os.write(write_fd, b"xq")
        os.close(write_fd)
        with KeyReader(reader) as keys:
            assert keys.poll(timeout=1.0) == "x"
            assert keys.poll() == "q"
            assert keys.poll() is None

    def test_invalid_utf8_is_replaced(self, pipe):
        reader, write_fd = pipe
        os.write(write_fd, b"\xffq")
        with KeyReader(reader) as keys:
            assert keys.poll(timeout=1.0) == "\ufffd"
            assert keys.poll() == "q"
