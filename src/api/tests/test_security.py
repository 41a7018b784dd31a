"""Unit tests for the bearer-token and claim guards."""

import unittest
from datetime import datetime, timezone

from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from api.security import get_current_user, get_current_user_required, require_claim
from domain.model.user import User, UserClaim
from services.token_service import TokenPrincipal, create_access_token


def _credentials(*claims: UserClaim) -> HTTPAuthorizationCredentials:
    now = datetime.now(timezone.utc)
    user = User(id='user-1', email='user@example.com', created_at=now, updated_at=now, claims=list(claims))
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=create_access_token(user).access_token)


class TestGetCurrentUser(unittest.TestCase):

    def test_optional_returns_none_without_token(self):
        self.assertIsNone(get_current_user(None))

    def test_optional_returns_none_for_bad_token(self):
        bad = HTTPAuthorizationCredentials(scheme="Bearer", credentials="bad")
        self.assertIsNone(get_current_user(bad))

    def test_required_raises_401_without_token(self):
        with self.assertRaises(HTTPException) as ctx:
            get_current_user_required(None)

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.headers, {"WWW-Authenticate": "Bearer"})

    def test_required_returns_principal_from_token(self):
        principal = get_current_user_required(_credentials())

        self.assertEqual(principal.user_id, 'user-1')
        self.assertEqual(principal.email, 'user@example.com')


class TestRequireClaim(unittest.TestCase):

    def _principal(self, *claims: UserClaim) -> TokenPrincipal:
        return TokenPrincipal(user_id='user-1', email='user@example.com', claims=list(claims), roles=[])

    def test_missing_claim_is_403(self):
        guard = require_claim("DeleteProvider")

        with self.assertRaises(HTTPException) as ctx:
            guard(self._principal(UserClaim("Other", "true")))

        self.assertEqual(ctx.exception.status_code, 403)

    def test_any_value_satisfies_type_only_guard(self):
        guard = require_claim("DeleteProvider")
        principal = self._principal(UserClaim("DeleteProvider", "whatever"))

        self.assertIs(guard(principal), principal)

    def test_value_guard_checks_value(self):
        guard = require_claim("DeleteProvider", "true")

        with self.assertRaises(HTTPException):
            guard(self._principal(UserClaim("DeleteProvider", "false")))


if __name__ == '__main__':
    unittest.main()
