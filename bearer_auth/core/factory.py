"""Wiring of service components from an AuthConfig."""

import logging
from dataclasses import dataclass
from typing import Optional

from .auth_service import AuthenticationService
from .config import AuthConfig
from ..persistence.credential_store import CredentialStore, JSONCredentialStore
from ..security.authentication.key_provider import KeyProvider, FileKeyProvider
from ..security.authentication.password_hasher import BcryptPasswordHasher
from ..security.authentication.token_issuer import TokenIssuer
from ..security.authentication.token_verifier import TokenVerifier
from ..security.authorization_guard import AuthorizationGuard


@dataclass
class ServiceComponents:
    """Everything the HTTP surface needs"""
    service: AuthenticationService
    guard: AuthorizationGuard


def build_components(
    config: AuthConfig,
    store: Optional[CredentialStore] = None,
    key_provider: Optional[KeyProvider] = None,
) -> ServiceComponents:
    """
    Build the service and guard for config

    Args:
        config: Validated configuration
        store: Credential store override (JSON file store in data_dir if None)
        key_provider: Key provider override (PEM files from config if None)
    """
    logger = logging.getLogger("core.factory")

    if store is None:
        store = JSONCredentialStore(config.data_dir)
    if key_provider is None:
        key_provider = FileKeyProvider(config.private_key_path, config.public_key_path)

    issuer = TokenIssuer(key_provider, default_ttl=config.token_ttl)
    verifier = TokenVerifier(key_provider, leeway=config.leeway)
    service = AuthenticationService(
        store=store,
        hasher=BcryptPasswordHasher(rounds=config.bcrypt_rounds),
        issuer=issuer,
    )

    logger.info(f"Components built (store={type(store).__name__}, keys={type(key_provider).__name__})")
    return ServiceComponents(service=service, guard=AuthorizationGuard(verifier))
