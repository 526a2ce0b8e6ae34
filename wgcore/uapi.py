"""Unix-socket control channel: opening, listening and watching for removal."""

from __future__ import annotations

import errno
import os
import queue
import select
import socket
import threading
from typing import Union

IPC_ERROR_IO = -errno.EIO
IPC_ERROR_PROTOCOL = -errno.EPROTO
IPC_ERROR_INVALID = -errno.EINVAL
IPC_ERROR_PORT_IN_USE = -errno.EADDRINUSE
IPC_ERROR_UNKNOWN = -55  # ENOANO

SOCKET_DIRECTORY = "/var/run/wireguard"

_POLL_INTERVAL = 0.1


def socket_path(iface: str, directory: str = SOCKET_DIRECTORY) -> str:
    """Path of the control socket for interface ``iface``."""
    return f"{directory}/{iface}.sock"


def _bind_listener(path: str) -> socket.socket:
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(path)
        sock.listen()
    except OSError:
        sock.close()
        raise
    return sock


def _in_use(path: str) -> bool:
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as probe:
        try:
            probe.connect(path)
        except OSError:
            return False
        return True


def uapi_open(name: str, directory: str = SOCKET_DIRECTORY) -> socket.socket:
    """Create the listening control socket for ``name``.

    A stale socket file left behind by a dead process is removed; a live one
    raises ``OSError`` with ``EADDRINUSE``.
    """
    os.makedirs(directory, mode=0o755, exist_ok=True)
    path = socket_path(name, directory)

    old_umask = os.umask(0o077)
    try:
        try:
            return _bind_listener(path)
        except OSError:
            pass
        if _in_use(path):
            raise OSError(errno.EADDRINUSE, "unix socket in use", path)
        os.remove(path)
        return _bind_listener(path)
    finally:
        os.umask(old_umask)


class UAPIListener:
    """Accepts control connections until the socket file disappears or it is closed."""

    def __init__(self, sock: socket.socket, path: str) -> None:
        self._sock = sock
        self.path = path
        self._events: "queue.Queue[Union[socket.socket, BaseException]]" = queue.Queue()
        self._stop = threading.Event()
        self._closed = False
        self._close_lock = threading.Lock()
        threading.Thread(target=self._watch, daemon=True, name="uapi-watch").start()
        threading.Thread(target=self._accept_loop, daemon=True, name="uapi-accept").start()

    def __enter__(self) -> "UAPIListener":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _watch(self) -> None:
        while not self._stop.is_set():
            if not os.path.lexists(self.path):
                if not self._stop.is_set():
                    self._events.put(
                        FileNotFoundError(errno.ENOENT, "control socket removed", self.path)
                    )
                return
            self._stop.wait(_POLL_INTERVAL)

    def _accept_loop(self) -> None:
        while True:
            if self._stop.is_set():
                self._events.put(OSError(errno.EBADF, "listener closed"))
                return
            try:
                ready, _, _ = select.select([self._sock], [], [], _POLL_INTERVAL)
                if not ready:
                    continue
                conn, _ = self._sock.accept()
            except (OSError, ValueError) as exc:
                if self._stop.is_set():
                    self._events.put(OSError(errno.EBADF, "listener closed"))
                elif isinstance(exc, OSError):
                    self._events.put(exc)
                else:
                    self._events.put(OSError(errno.EBADF, str(exc)))
                return
            conn.setblocking(True)
            self._events.put(conn)

    def accept(self) -> socket.socket:
        """Wait for the next connection; raise the error that ended listening."""
        event = self._events.get()
        if isinstance(event, BaseException):
            self._events.put(event)
            raise event
        return event

    def close(self) -> None:
        """Stop listening and remove the socket file."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._stop.set()
        self._sock.close()
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            pass

    def addr(self) -> str:
        """Path the listener is bound to."""
        return self.path


def uapi_listen(
    name: str, sock: socket.socket, directory: str = SOCKET_DIRECTORY
) -> UAPIListener:
    """Wrap a listening socket and watch its file for deletion."""
    path = socket_path(name, directory)
    if not os.path.lexists(path):
        raise FileNotFoundError(errno.ENOENT, "control socket missing", path)
    return UAPIListener(sock, path)