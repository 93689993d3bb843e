"""Tests for tlsbuilder.security.providers — one-time provider registration."""

from __future__ import annotations

import inspect
import threading
import time

from tlsbuilder.security.providers import (
    PYCA_PROVIDER_NAME,
    Provider,
    ProviderRegistry,
    PyCaPkcs12Provider,
    default_registry,
)


class _CountingFactory:
    """Slow provider factory that counts how often it runs."""

    def __init__(self, delay: float = 0.0) -> None:
        self.calls = 0
        self._delay = delay
        self._lock = threading.Lock()

    def __call__(self) -> Provider:
        with self._lock:
            self.calls += 1
        time.sleep(self._delay)
        return PyCaPkcs12Provider()


class TestRegistry:
    def test_starts_empty(self, registry):
        assert registry.names() == ()
        assert registry.get(PYCA_PROVIDER_NAME) is None
        assert registry.registration_count(PYCA_PROVIDER_NAME) == 0

    def test_ensure_registered_installs_once(self, registry):
        first = registry.ensure_registered()
        second = registry.ensure_registered()

        assert first is second
        assert isinstance(first, PyCaPkcs12Provider)
        assert registry.names() == (PYCA_PROVIDER_NAME,)
        assert registry.registration_count(PYCA_PROVIDER_NAME) == 1

    def test_register_refuses_duplicates(self, registry):
        assert registry.register(PyCaPkcs12Provider()) is True
        assert registry.register(PyCaPkcs12Provider()) is False
        assert registry.registration_count(PYCA_PROVIDER_NAME) == 1

    def test_ensure_registered_reuses_explicit_registration(self, registry):
        provider = PyCaPkcs12Provider()
        registry.register(provider)
        factory = _CountingFactory()

        assert registry.ensure_registered(factory) is provider
        assert factory.calls == 0

    def test_reset(self, registry):
        registry.ensure_registered()
        registry.reset()
        assert registry.names() == ()
        assert registry.registration_count(PYCA_PROVIDER_NAME) == 0

    def test_default_registry_is_process_wide(self):
        assert default_registry() is default_registry()
        assert isinstance(default_registry(), ProviderRegistry)


class TestPyCaProvider:
    def test_load_pkcs12_signature_matches_interface(self):
        concrete = inspect.signature(PyCaPkcs12Provider.load_pkcs12)
        abstract = inspect.signature(Provider.load_pkcs12)

        assert concrete == abstract
        assert concrete.parameters["data"].annotation == "bytes"
        assert concrete.parameters["password"].annotation == "bytes | None"
        assert concrete.return_annotation != inspect.Signature.empty

    def test_load_pkcs12_returns_parsed_parts(self, p12_path):
        key, cert, extra = PyCaPkcs12Provider().load_pkcs12(p12_path.read_bytes(), b"hunter2")
        assert key is not None
        assert cert is not None
        assert list(extra) == []


class TestConcurrentRegistration:
    def test_many_threads_register_exactly_once(self, registry):
        factory = _CountingFactory(delay=0.05)
        barrier = threading.Barrier(16)
        results: list[Provider] = []
        results_lock = threading.Lock()

        def worker():
            barrier.wait()
            provider = registry.ensure_registered(factory)
            with results_lock:
                results.append(provider)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert factory.calls == 1
        assert registry.registration_count(PYCA_PROVIDER_NAME) == 1
        assert len(results) == 16
        assert all(p is results[0] for p in results)
