"""Unit tests for token_service: JWT contents and verification."""

import unittest
from datetime import datetime, timedelta, timezone

from jose import jwt

from domain.model.user import DELETE_PROVIDER_CLAIM, User, UserClaim
from services import token_service


def _user(**overrides) -> User:
    now = datetime.now(timezone.utc)
    defaults = dict(id='user-1', email='user@example.com', created_at=now, updated_at=now)
    defaults.update(overrides)
    return User(**defaults)


class TestCreateAccessToken(unittest.TestCase):

    def test_token_embeds_standard_claims(self):
        token = token_service.create_access_token(_user())

        payload = jwt.get_unverified_claims(token.access_token)
        self.assertEqual(payload['sub'], 'user-1')
        self.assertEqual(payload['email'], 'user@example.com')
        self.assertEqual(payload['iss'], token_service.JWT_ISSUER)
        self.assertEqual(payload['aud'], token_service.JWT_AUDIENCE)
        self.assertEqual(payload['exp'] - payload['iat'], token.expires_in)
        self.assertTrue(payload['jti'])

    def test_token_embeds_user_claims_and_roles(self):
        user = _user(
            claims=[UserClaim(DELETE_PROVIDER_CLAIM, 'true'), UserClaim('Scope', 'a'), UserClaim('Scope', 'b')],
            roles=['Admin'],
        )

        token = token_service.create_access_token(user)

        payload = jwt.get_unverified_claims(token.access_token)
        self.assertEqual(payload[DELETE_PROVIDER_CLAIM], 'true')
        self.assertEqual(payload['Scope'], ['a', 'b'])
        self.assertEqual(payload['role'], ['Admin'])
        self.assertEqual(token.claims[-1], UserClaim('role', 'Admin'))

    def test_reserved_claim_types_are_not_overwritten(self):
        token = token_service.create_access_token(_user(claims=[UserClaim('sub', 'someone-else')]))

        self.assertEqual(jwt.get_unverified_claims(token.access_token)['sub'], 'user-1')


class TestVerifyToken(unittest.TestCase):

    def test_round_trip_principal(self):
        user = _user(claims=[UserClaim(DELETE_PROVIDER_CLAIM, 'true')], roles=['Admin'])
        token = token_service.create_access_token(user)

        principal = token_service.verify_token(token.access_token)

        self.assertEqual(principal.user_id, 'user-1')
        self.assertEqual(principal.email, 'user@example.com')
        self.assertEqual(principal.claims, [UserClaim(DELETE_PROVIDER_CLAIM, 'true')])
        self.assertEqual(principal.roles, ['Admin'])
        self.assertTrue(principal.has_claim(DELETE_PROVIDER_CLAIM))
        self.assertFalse(principal.has_claim(DELETE_PROVIDER_CLAIM, 'false'))

    def test_rejects_garbage(self):
        self.assertIsNone(token_service.verify_token('not-a-token'))

    def test_rejects_wrong_signature(self):
        token = token_service.create_access_token(_user()).access_token
        payload = jwt.get_unverified_claims(token)
        forged = jwt.encode(payload, 'another-secret', algorithm='HS256')

        self.assertIsNone(token_service.verify_token(forged))

    def test_rejects_expired(self):
        now = datetime.now(timezone.utc)
        expired = jwt.encode({
            'sub': 'user-1',
            'iat': now - timedelta(hours=3),
            'nbf': now - timedelta(hours=3),
            'exp': now - timedelta(hours=1),
            'iss': token_service.JWT_ISSUER,
            'aud': token_service.JWT_AUDIENCE,
        }, token_service.JWT_SECRET_KEY, algorithm='HS256')

        self.assertIsNone(token_service.verify_token(expired))

    def test_rejects_wrong_audience(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode({
            'sub': 'user-1',
            'exp': now + timedelta(hours=1),
            'iss': token_service.JWT_ISSUER,
            'aud': 'somewhere-else',
        }, token_service.JWT_SECRET_KEY, algorithm='HS256')

        self.assertIsNone(token_service.verify_token(token))


if __name__ == '__main__':
    unittest.main()
