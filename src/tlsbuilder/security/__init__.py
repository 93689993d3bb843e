"""Key material and cryptographic provider handling.

Public API::

    from tlsbuilder.security import KeyMaterialLoader, default_registry

    handle = KeyMaterialLoader(default_registry()).load(path, "PKCS12", password)
"""

from tlsbuilder.security.keystore import KeyMaterialHandle, KeyMaterialLoader
from tlsbuilder.security.providers import (
    PYCA_PROVIDER_NAME,
    Provider,
    ProviderRegistry,
    PyCaPkcs12Provider,
    default_registry,
)

__all__ = [
    "PYCA_PROVIDER_NAME",
    "KeyMaterialHandle",
    "KeyMaterialLoader",
    "Provider",
    "ProviderRegistry",
    "PyCaPkcs12Provider",
    "default_registry",
]
