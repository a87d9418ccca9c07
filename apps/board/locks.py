# apps/board/locks.py

"""
Guarda de exclusão mútua para movimentação de cards

Um lock nomeado com dois prazos:
- wait_timeout: quanto o chamador espera para adquirir (senão Busy)
- lease_timeout: quanto tempo o lock pode ficar preso antes de ser
  liberado à força

Dois backends:
- RedisLockBackend: lock distribuído via django-redis, para várias instâncias
- LocalLockBackend: lock em processo, para instância única e testes
"""

import logging
import threading
import time
import uuid
from contextlib import contextmanager

from django.conf import settings
from django.core.cache import caches
from django.utils.module_loading import import_string
from redis.exceptions import LockError

from apps.core.exceptions import Busy

logger = logging.getLogger(__name__)

MOVE_CARD_LOCK = 'moveCard'


class BaseLockBackend:
    """Uma instância por tentativa de aquisição"""

    def __init__(self, name, wait_timeout, lease_timeout, **options):
        self.name = name
        self.wait_timeout = wait_timeout
        self.lease_timeout = lease_timeout
        self.options = options

    def acquire(self):
        raise NotImplementedError

    def release(self):
        raise NotImplementedError


class RedisLockBackend(BaseLockBackend):
    """Lock distribuído usando o cache Redis (django-redis)"""

    def __init__(self, name, wait_timeout, lease_timeout, **options):
        super().__init__(name, wait_timeout, lease_timeout, **options)
        cache = caches[options.get('CACHE_ALIAS', 'default')]
        self._lock = cache.lock(
            f'lock:{name}',
            timeout=lease_timeout,
            sleep=options.get('SLEEP', 0.05),
            blocking_timeout=wait_timeout,
        )

    def acquire(self):
        return bool(self._lock.acquire(blocking=True))

    def release(self):
        try:
            self._lock.release()
            return True
        except LockError:
            # lease expirou e o Redis já liberou (ou outro mover assumiu)
            logger.warning("Lock '%s' já havia expirado ao liberar", self.name)
            return False


class _LocalLease:

    def __init__(self):
        self.condition = threading.Condition()
        self.token = None
        self.expires_at = 0.0


_local_leases = {}
_local_leases_guard = threading.Lock()


def _get_local_lease(name):
    with _local_leases_guard:
        return _local_leases.setdefault(name, _LocalLease())


class LocalLockBackend(BaseLockBackend):
    """
    Lock em processo com lease

    A expiração é preguiçosa: quem está esperando assume o lock assim
    que o lease do dono atual vence.
    """

    def __init__(self, name, wait_timeout, lease_timeout, **options):
        super().__init__(name, wait_timeout, lease_timeout, **options)
        self._lease = _get_local_lease(name)
        self._token = uuid.uuid4().hex

    def _try_take(self, now):
        lease = self._lease
        if lease.token is not None and now < lease.expires_at:
            return False
        if lease.token is not None:
            logger.warning("Lock '%s' liberado à força após lease de %.3fs", self.name, self.lease_timeout)
        lease.token = self._token
        lease.expires_at = now + self.lease_timeout
        return True

    def acquire(self):
        lease = self._lease
        deadline = time.monotonic() + self.wait_timeout
        with lease.condition:
            while True:
                now = time.monotonic()
                if self._try_take(now):
                    return True
                remaining = deadline - now
                if remaining <= 0:
                    return False
                # acordar no máximo quando o lease atual vencer
                lease.condition.wait(min(remaining, max(lease.expires_at - now, 0.001)))

    def release(self):
        lease = self._lease
        with lease.condition:
            if lease.token != self._token:
                logger.warning("Lock '%s' já havia expirado ao liberar", self.name)
                return False
            lease.token = None
            lease.expires_at = 0.0
            lease.condition.notify_all()
            return True


class MovementGuard:
    """Guarda nomeada: adquire com espera limitada, libera sempre"""

    def __init__(self, name, wait_timeout, lease_timeout, backend_class=LocalLockBackend, options=None):
        self.name = name
        self.wait_timeout = wait_timeout
        self.lease_timeout = lease_timeout
        self.backend_class = backend_class
        self.options = options or {}

    @classmethod
    def from_settings(cls, name=None):
        config = getattr(settings, 'CARD_MOVE_LOCK', {})
        backend = config.get('BACKEND', 'apps.board.locks.LocalLockBackend')
        return cls(
            name=name or config.get('NAME', MOVE_CARD_LOCK),
            wait_timeout=float(config.get('WAIT_TIMEOUT', 5.0)),
            lease_timeout=float(config.get('LEASE_TIMEOUT', 0.1)),
            backend_class=import_string(backend) if isinstance(backend, str) else backend,
            options=config.get('OPTIONS', {}),
        )

    @contextmanager
    def hold(self):
        lock = self.backend_class(self.name, self.wait_timeout, self.lease_timeout, **self.options)

        if not lock.acquire():
            logger.warning(
                "Lock '%s' não adquirido em %.2fs", self.name, self.wait_timeout
            )
            raise Busy(self.name, self.wait_timeout)

        acquired_at = time.monotonic()
        try:
            yield lock
        finally:
            held = time.monotonic() - acquired_at
            if held > self.lease_timeout:
                logger.warning(
                    "Seção crítica de '%s' levou %.3fs, acima do lease de %.3fs",
                    self.name, held, self.lease_timeout
                )
            lock.release()
