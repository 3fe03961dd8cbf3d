from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, Any, Callable, Optional

from steamguard.core.logger import get_logger
from steamguard.web.endpoints import SteamEndpoints
from steamguard.web.wire import QueryTimeResponse, parse_response

if TYPE_CHECKING:
    from steamguard.web.transport import SteamTransport


class TimeSynchronizer:
    """
    Keeps the offset between the local clock and Steam's clock.

    The offset is fetched once, on first use, and reused until someone asks
    for a resync. If the query fails the synchronizer still answers with plain
    local time and reports `verified == False`.
    """

    def __init__(
        self,
        transport: "SteamTransport",
        *,
        endpoints: Optional[SteamEndpoints] = None,
        clock: Callable[[], float] = time.time,
        logger: Any = None,
    ):
        self.transport = transport
        self.endpoints = endpoints or SteamEndpoints()
        self.clock = clock
        self.logger = logger or get_logger("time")
        self._lock = threading.Lock()
        self._sync_lock = threading.Lock()
        self._offset = 0
        self._attempted = False
        self._verified = False

    @property
    def offset(self) -> int:
        with self._lock:
            return self._offset

    @property
    def verified(self) -> bool:
        with self._lock:
            return self._verified

    def local_time(self) -> int:
        return int(self.clock())

    def aligned_time(self) -> int:
        with self._lock:
            attempted = self._attempted
        if not attempted:
            self.sync()
        return self.local_time() + self.offset

    def sync(self, force: bool = False) -> bool:
        """
        Query Steam's clock and store the offset.

        One query runs at a time; callers arriving while the first query is in
        flight wait for its result. A failed query resets the offset to 0 so
        aligned time is plain local time until a later sync succeeds.
        """
        with self._sync_lock:
            with self._lock:
                if self._attempted and not force:
                    return self._verified

            local = self.local_time()
            body = self.transport.api_post(self.endpoints.query_time, {"steamid": "0"})
            parsed = parse_response(QueryTimeResponse, body)

            with self._lock:
                self._attempted = True
                if parsed is None:
                    self._offset = 0
                    self._verified = False
                else:
                    self._offset = int(parsed.response.server_time) - local
                    self._verified = True
                offset = self._offset

        if parsed is None:
            self.logger.warning("Steam time query failed; falling back to local clock")
            return False
        self.logger.info("Steam time aligned (offset=%ss)", offset)
        return True

    def resync(self) -> bool:
        return self.sync(force=True)
