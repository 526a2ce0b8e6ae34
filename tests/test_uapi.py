import errno
import os
import shutil
import socket
import stat
import tempfile

import pytest

from wgcore.uapi import (
    IPC_ERROR_PORT_IN_USE,
    socket_path,
    uapi_listen,
    uapi_open,
)


@pytest.fixture
def sock_dir():
    directory = tempfile.mkdtemp(prefix="wg", dir="/tmp")
    yield directory
    shutil.rmtree(directory, ignore_errors=True)


def test_socket_path_default_directory():
    assert socket_path("wg0") == "/var/run/wireguard/wg0.sock"


def test_socket_path_custom_directory(sock_dir):
    assert socket_path("wg1", sock_dir) == os.path.join(sock_dir, "wg1.sock")


def test_open_creates_private_socket(sock_dir):
    sock = uapi_open("wg0", sock_dir)
    try:
        mode = os.lstat(socket_path("wg0", sock_dir)).st_mode
        assert stat.S_ISSOCK(mode)
        assert mode & 0o077 == 0
    finally:
        sock.close()


def test_open_creates_missing_directory(sock_dir):
    nested = os.path.join(sock_dir, "run")
    sock = uapi_open("wg0", nested)
    try:
        assert os.path.isdir(nested)
        assert sock.getsockname() == socket_path("wg0", nested)
    finally:
        sock.close()


def test_open_refuses_live_socket(sock_dir):
    first = uapi_open("wg0", sock_dir)
    try:
        with pytest.raises(OSError) as info:
            uapi_open("wg0", sock_dir)
        assert info.value.errno == errno.EADDRINUSE
        assert -info.value.errno == IPC_ERROR_PORT_IN_USE
    finally:
        first.close()


def test_open_replaces_stale_socket(sock_dir):
    path = socket_path("wg0", sock_dir)
    stale = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    stale.bind(path)
    stale.close()
    assert os.path.exists(path)
    sock = uapi_open("wg0", sock_dir)
    try:
        assert sock.getsockname() == path
    finally:
        sock.close()


def test_listen_requires_socket_file(sock_dir):
    dummy = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        with pytest.raises(FileNotFoundError):
            uapi_listen("missing", dummy, sock_dir)
    finally:
        dummy.close()


def test_accept_round_trip(sock_dir):
    listener = uapi_listen("wg0", uapi_open("wg0", sock_dir), sock_dir)
    try:
        assert listener.addr() == socket_path("wg0", sock_dir)
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
            client.connect(listener.addr())
            server = listener.accept()
            with server:
                client.sendall(b"get=1\n\n")
                assert server.recv(64) == b"get=1\n\n"
    finally:
        listener.close()


def test_accept_fails_when_socket_file_removed(sock_dir):
    listener = uapi_listen("wg0", uapi_open("wg0", sock_dir), sock_dir)
    try:
        os.unlink(socket_path("wg0", sock_dir))
        with pytest.raises(FileNotFoundError):
            listener.accept()
    finally:
        listener.close()


def test_close_unlinks_and_stops_accepting(sock_dir):
    listener = uapi_listen("wg0", uapi_open("wg0", sock_dir), sock_dir)
    listener.close()
    assert not os.path.exists(socket_path("wg0", sock_dir))
    with pytest.raises(OSError):
        listener.accept()