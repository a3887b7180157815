"""
Socket failure classification.

Maps low-level connect/read/write failures onto ConnectionDetail.
Exception type is checked first; errno is the fallback for plain OSError.
A host resolving to several addresses yields one failure per address;
common_detail() reduces them to the detail they share.

Pure: no logging, no state.
"""

from __future__ import annotations

import asyncio
import errno
from typing import Iterable

from transport.connection_status import ConnectionDetail


_ERRNO_DETAILS: dict[int, ConnectionDetail] = {
    errno.ECONNREFUSED: ConnectionDetail.CONN_REFUSED,
    errno.ECONNRESET: ConnectionDetail.CONN_RESET,
    errno.EPIPE: ConnectionDetail.CONN_RESET,
    errno.ETIMEDOUT: ConnectionDetail.TIMED_OUT,
    errno.EINTR: ConnectionDetail.INTERRUPTED,
    errno.ECONNABORTED: ConnectionDetail.NONE,
}


def classify_error(err: BaseException) -> ConnectionDetail:
    """
    Classify a socket failure.

    ConnectionAbortedError (graceful abort) maps to NONE.
    Anything unrecognised maps to UNKNOWN; the caller logs it.
    """
    if isinstance(err, ConnectionRefusedError):
        return ConnectionDetail.CONN_REFUSED
    if isinstance(err, (ConnectionResetError, BrokenPipeError)):
        return ConnectionDetail.CONN_RESET
    if isinstance(err, ConnectionAbortedError):
        return ConnectionDetail.NONE
    if isinstance(err, (TimeoutError, asyncio.TimeoutError)):
        return ConnectionDetail.TIMED_OUT
    if isinstance(err, InterruptedError):
        return ConnectionDetail.INTERRUPTED

    if isinstance(err, OSError) and err.errno is not None:
        return _ERRNO_DETAILS.get(err.errno, ConnectionDetail.UNKNOWN)

    return ConnectionDetail.UNKNOWN


def common_detail(errors: Iterable[BaseException]) -> ConnectionDetail:
    """
    Detail shared by every per-address failure of one connect.

    ::1 and 127.0.0.1 both refusing is still CONN_REFUSED; mixed or empty
    failures are UNKNOWN.
    """
    details = {classify_error(err) for err in errors}
    if len(details) == 1:
        return details.pop()
    return ConnectionDetail.UNKNOWN
