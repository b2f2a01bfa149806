"""PAT authentication helpers and the shared connection provider.

Azure DevOps accepts a Personal Access Token as the password half of HTTP Basic
authentication with an empty username, i.e. ``Authorization: Basic base64(':' + PAT)``.
"""

import base64
import threading
from concurrent.futures import Future
from loguru import logger
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar('T')


def auth_header(personal_access_token: str) -> str:
    """Return the HTTP Basic ``Authorization`` header value for a PAT.

    Args:
        personal_access_token: The Personal Access Token

    Returns:
        Header value of the form ``Basic <base64(':' + token)>``
    """
    credentials = base64.b64encode(f':{personal_access_token}'.encode()).decode()
    return f'Basic {credentials}'


class ConnectionProvider(Generic[T]):
    """Lazily builds one connection and hands the same instance to every caller.

    Construction is single-flight: callers arriving while the first construction is
    running wait for it and receive its outcome, including its exception. A failed
    construction is not cached, so the next call after a failure tries again.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        """Initialize the provider.

        Args:
            factory: Zero-argument callable that builds the connection
        """
        self._factory = factory
        self._lock = threading.Lock()
        self._connection: Optional[T] = None
        self._pending: Optional['Future[T]'] = None

    @property
    def connected(self) -> bool:
        """Whether a connection has been built."""
        return self._connection is not None

    def get_connection(self) -> T:
        """Return the shared connection, building it on first use."""
        with self._lock:
            if self._connection is not None:
                return self._connection
            pending = self._pending
            is_builder = pending is None
            if pending is None:
                pending = self._pending = Future()

        if not is_builder:
            return pending.result()

        try:
            connection = self._factory()
        except BaseException as e:
            with self._lock:
                self._pending = None
            pending.set_exception(e)
            logger.warning(f'Azure DevOps connection construction failed: {e}')
            raise

        with self._lock:
            self._connection = connection
            self._pending = None
        pending.set_result(connection)
        return connection
