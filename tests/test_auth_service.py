#!/usr/bin/env python3
"""
Authentication service tests

Covers:
- register(): success, duplicate, concurrent duplicates, bad input
- login(): token for the right password, one failure for everything else
- Timing equalization for unknown users
- Infrastructure failures surfacing as typed errors
- End-to-end: register, login, authorize
"""

import shutil
import sys
import tempfile
import unittest
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from pathlib import Path
from threading import Barrier
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from bearer_auth.core.auth_service import (
    AuthenticationService,
    AuthenticationFailedError,
    CredentialExistsError,
    FailureReason,
)
from bearer_auth.core.config import AuthConfig
from bearer_auth.core.factory import build_components
from bearer_auth.persistence.credential_store import (
    Credential,
    InMemoryCredentialStore,
    JSONCredentialStore,
    PutResult,
)
from bearer_auth.security.authentication.key_provider import (
    StaticKeyProvider,
    generate_ec_key_pair,
    write_key_pair,
)
from bearer_auth.security.authentication.password_hasher import BcryptPasswordHasher, HashingError
from bearer_auth.security.authentication.token_issuer import TokenIssuer, SigningError
from bearer_auth.security.authentication.token_verifier import TokenVerifier
from bearer_auth.security.authorization_guard import AuthorizationGuard, UnauthorizedError


PRIVATE_PEM, PUBLIC_PEM = generate_ec_key_pair()


class TestAuthenticationService(unittest.TestCase):
    """Test suite for AuthenticationService"""

    def setUp(self):
        self.store = InMemoryCredentialStore()
        self.hasher = BcryptPasswordHasher(rounds=4)
        self.keys = StaticKeyProvider(PRIVATE_PEM, PUBLIC_PEM)
        self.issuer = TokenIssuer(self.keys)
        self.verifier = TokenVerifier(self.keys)
        self.service = AuthenticationService(self.store, self.hasher, self.issuer)

    def test_register_stores_hash_not_password(self):
        """Test registration persists a bcrypt hash"""
        credential = self.service.register("alice", "s3cret")

        stored = self.store.get_by_username("alice")
        self.assertEqual(stored, credential)
        self.assertNotEqual(stored.password_hash, "s3cret")
        self.assertTrue(self.hasher.verify("s3cret", stored.password_hash))

    def test_register_duplicate(self):
        """Test second registration raises and keeps the first password"""
        self.service.register("alice", "first")

        with self.assertRaises(CredentialExistsError):
            self.service.register("alice", "second")

        self.service.login("alice", "first")
        with self.assertRaises(AuthenticationFailedError):
            self.service.login("alice", "second")

    def test_concurrent_register_single_winner(self):
        """Test racing registrations of one username: exactly one succeeds"""
        count = 8
        barrier = Barrier(count)

        def attempt(i):
            barrier.wait()
            try:
                self.service.register("alice", f"password-{i}")
                return True
            except CredentialExistsError:
                return False

        with ThreadPoolExecutor(max_workers=count) as pool:
            results = list(pool.map(attempt, range(count)))

        self.assertEqual(results.count(True), 1)
        self.assertEqual(len(self.store), 1)

    def test_register_rejects_bad_input(self):
        """Test empty username and non-string values"""
        for username, password in [("", "pw"), (None, "pw"), ("alice", None), ("alice", 123)]:
            with self.assertRaises(ValueError):
                self.service.register(username, password)
        self.assertEqual(len(self.store), 0)

    def test_register_accepts_empty_password(self):
        """Test empty password is a valid (if weak) password"""
        self.service.register("alice", "")
        self.service.login("alice", "")

    def test_login_issues_verifiable_token(self):
        """Test token subject is the username"""
        self.service.register("alice", "s3cret")
        issued = self.service.login("alice", "s3cret")

        claims = self.verifier.verify(issued.token)
        self.assertEqual(claims.subject, "alice")
        self.assertEqual(issued.token_type, "Bearer")

    def test_login_uses_configured_ttl(self):
        """Test service TTL overrides issuer default"""
        service = AuthenticationService(
            self.store, self.hasher, self.issuer, token_ttl=timedelta(minutes=5)
        )
        service.register("alice", "s3cret")
        issued = service.login("alice", "s3cret")

        lifetime = issued.expires_at - Credential("x", "y").created_at
        self.assertLessEqual(lifetime, timedelta(minutes=5))
        self.assertGreater(lifetime, timedelta(minutes=4))

    def test_unknown_user_and_wrong_password_look_the_same(self):
        """Test both failures share type and message"""
        self.service.register("alice", "s3cret")

        with self.assertRaises(AuthenticationFailedError) as unknown:
            self.service.login("mallory", "s3cret")
        with self.assertRaises(AuthenticationFailedError) as wrong:
            self.service.login("alice", "guess")

        self.assertEqual(str(unknown.exception), str(wrong.exception))
        self.assertEqual(unknown.exception.reason, FailureReason.NOT_FOUND)
        self.assertEqual(wrong.exception.reason, FailureReason.WRONG_PASSWORD)

    def test_unknown_user_still_verifies_a_hash(self):
        """Test a bcrypt verification runs when the username is unknown"""
        with patch.object(self.hasher, "verify", wraps=self.hasher.verify) as verify:
            with self.assertRaises(AuthenticationFailedError):
                self.service.login("mallory", "guess")

        verify.assert_called_once()

    def test_no_token_issued_on_failure(self):
        """Test issuer untouched on failed login"""
        self.service.register("alice", "s3cret")

        with patch.object(self.issuer, "issue", wraps=self.issuer.issue) as issue:
            with self.assertRaises(AuthenticationFailedError):
                self.service.login("alice", "guess")

        issue.assert_not_called()

    def test_login_rejects_non_strings(self):
        """Test non-string arguments raise ValueError"""
        with self.assertRaises(ValueError):
            self.service.login(None, "pw")
        with self.assertRaises(ValueError):
            self.service.login("alice", None)

    def test_corrupt_stored_hash(self):
        """Test corrupt hash is an infrastructure error, not a failed login"""
        self.store.put_if_absent(Credential("alice", "not-a-hash"))

        with self.assertRaises(HashingError):
            self.service.login("alice", "s3cret")

    def test_missing_signing_key(self):
        """Test login after a correct password fails with SigningError"""
        service = AuthenticationService(
            self.store, self.hasher, TokenIssuer(StaticKeyProvider(public_pem=PUBLIC_PEM))
        )
        service.register("alice", "s3cret")

        with self.assertRaises(SigningError):
            service.login("alice", "s3cret")

    def test_store_result_drives_duplicate(self):
        """Test ALREADY_EXISTS from the store is the duplicate signal"""
        with patch.object(self.store, "put_if_absent", return_value=PutResult.ALREADY_EXISTS):
            with self.assertRaises(CredentialExistsError):
                self.service.register("alice", "s3cret")


class TestBuildComponents(unittest.TestCase):
    """Test suite for build_components with injected collaborators"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.config = AuthConfig(data_dir=str(Path(self.test_dir) / "data"), bcrypt_rounds=4)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_empty_injected_store_is_used(self):
        """Test an empty in-memory store is kept, not replaced by the file store"""
        store = InMemoryCredentialStore()
        keys = StaticKeyProvider(PRIVATE_PEM, PUBLIC_PEM)

        components = build_components(self.config, store=store, key_provider=keys)
        components.service.register("alice", "pw")

        self.assertIs(components.service.store, store)
        self.assertIs(components.service.issuer.key_provider, keys)
        self.assertEqual(len(store), 1)
        self.assertFalse(Path(self.config.data_dir).exists())

    def test_falsy_key_provider_is_used(self):
        """Test a key provider that is falsy is still the one wired in"""

        class EmptyLookingKeys(StaticKeyProvider):
            def __bool__(self):
                return False

        keys = EmptyLookingKeys(PRIVATE_PEM, PUBLIC_PEM)
        components = build_components(self.config, store=InMemoryCredentialStore(), key_provider=keys)

        components.service.register("alice", "pw")
        issued = components.service.login("alice", "pw")
        self.assertEqual(components.guard.authorize(f"Bearer {issued.token}").subject, "alice")
        self.assertIs(components.guard.verifier.key_provider, keys)


class TestEndToEnd(unittest.TestCase):
    """Register, login and authorize through build_components"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        keys_dir = Path(self.test_dir) / "keys"
        private_path, public_path = write_key_pair(keys_dir)

        self.config = AuthConfig(
            data_dir=str(Path(self.test_dir) / "data"),
            private_key_path=str(private_path),
            public_key_path=str(public_path),
            bcrypt_rounds=4,
        )
        components = build_components(self.config)
        self.service = components.service
        self.guard = components.guard

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_bob_flow(self):
        """Test register, login, authorize, then reject a wrong password"""
        self.service.register("bob", "pw1")
        issued = self.service.login("bob", "pw1")

        claims = self.guard.authorize(f"Bearer {issued.token}")
        self.assertEqual(claims.subject, "bob")

        with self.assertRaises(AuthenticationFailedError):
            self.service.login("bob", "pw2")

    def test_credentials_persist_on_disk(self):
        """Test a fresh store on the same directory sees the user"""
        self.service.register("bob", "pw1")

        store = JSONCredentialStore(self.config.data_dir)
        self.assertIsNotNone(store.get_by_username("bob"))

    def test_rotated_keys_invalidate_old_tokens(self):
        """Test tokens signed with the previous key pair are refused"""
        self.service.register("bob", "pw1")
        old = self.service.login("bob", "pw1")

        write_key_pair(Path(self.config.private_key_path).parent, overwrite=True)

        with self.assertRaises(UnauthorizedError):
            self.guard.authorize(f"Bearer {old.token}")

        fresh = self.service.login("bob", "pw1")
        self.assertEqual(self.guard.authorize(f"Bearer {fresh.token}").subject, "bob")


if __name__ == "__main__":
    unittest.main(verbosity=2)
