"""Tests for gitlab_mcp/security/policy.py — credential selection rules."""

import itertools

import pytest

from gitlab_mcp.clients.models import AuthMode, Credential, OperationKind
from gitlab_mcp.security.policy import (
    NO_AUTH_CONFIGURED,
    USER_AUTH_REQUIRED,
    WRITE_REQUIRES_USER,
    Reject,
    UseShared,
    UseUser,
    decide,
)

ALL_INPUTS = list(itertools.product(OperationKind, AuthMode, [True, False]))


class TestUserCredentialPrecedence:

    @pytest.mark.parametrize("operation,mode,shared_present", ALL_INPUTS)
    def test_user_credential_always_wins(self, operation, mode, shared_present):
        cred = Credential(token="T")
        assert decide(operation, cred, mode, shared_present) == UseUser(cred)


class TestWriteWithoutCredential:

    @pytest.mark.parametrize("mode", list(AuthMode))
    @pytest.mark.parametrize("shared_present", [True, False])
    def test_write_is_always_rejected(self, mode, shared_present):
        decision = decide(OperationKind.WRITE, None, mode, shared_present)
        assert decision == Reject(WRITE_REQUIRES_USER)


class TestReadWithoutCredential:

    def test_hybrid_with_shared_uses_shared(self):
        assert decide(OperationKind.READ, None, AuthMode.HYBRID, True) == UseShared()

    def test_hybrid_without_shared_rejects(self):
        assert decide(OperationKind.READ, None, AuthMode.HYBRID, False) == Reject(USER_AUTH_REQUIRED)

    def test_per_user_ignores_shared(self):
        assert decide(OperationKind.READ, None, AuthMode.PER_USER, True) == Reject(USER_AUTH_REQUIRED)

    def test_per_user_without_shared_rejects(self):
        assert decide(OperationKind.READ, None, AuthMode.PER_USER, False) == Reject(USER_AUTH_REQUIRED)

    def test_shared_mode_uses_shared(self):
        assert decide(OperationKind.READ, None, AuthMode.SHARED, True) == UseShared()

    def test_shared_mode_without_token(self):
        assert decide(OperationKind.READ, None, AuthMode.SHARED, False) == Reject(NO_AUTH_CONFIGURED)

    def test_accepts_plain_string_values(self):
        assert decide("read", None, "hybrid", True) == UseShared()
        assert decide("write", None, "shared", True) == Reject(WRITE_REQUIRES_USER)


class TestDeterminism:

    @pytest.mark.parametrize("operation,mode,shared_present", ALL_INPUTS)
    def test_same_inputs_same_decision(self, operation, mode, shared_present):
        first = decide(operation, None, mode, shared_present)
        second = decide(operation, None, mode, shared_present)
        assert first == second
        assert isinstance(first, (UseShared, UseUser, Reject))
