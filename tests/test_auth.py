# tests/test_auth.py
"""
Tests for PocketLedger.core.auth.

Run with:
    python -m unittest tests.test_auth
"""
import unittest

from PocketLedger.core import storage
from PocketLedger.core.auth import AuthService
from PocketLedger.status import status


class AuthServiceTests(unittest.TestCase):

    def setUp(self) -> None:
        self.store = storage.MemoryStore()
        self.auth = AuthService(self.store)

    def test_register_signs_in(self):
        user = self.auth.register('a@example.com', 'secret1', 'Ann')

        self.assertEqual(user['email'], 'a@example.com')
        self.assertEqual(user['displayName'], 'Ann')
        self.assertIn('createdAt', user)
        self.assertEqual(self.auth.current_user(), user)
        self.assertEqual(storage.load_json(self.store, storage.USERS_KEY), [user])

    def test_register_duplicate_email(self):
        self.auth.register('a@example.com', 'secret1', 'Ann')
        with self.assertRaises(status.UserExistsException):
            self.auth.register('a@example.com', 'other12', 'Another Ann')

    def test_login_and_logout(self):
        user = self.auth.register('a@example.com', 'secret1', 'Ann')
        self.auth.logout()
        self.assertIsNone(self.auth.current_user())

        self.assertEqual(self.auth.login('a@example.com', 'secret1')['id'], user['id'])
        self.assertEqual(self.auth.current_user()['id'], user['id'])

    def test_login_invalid_credentials(self):
        self.auth.register('a@example.com', 'secret1', 'Ann')
        with self.assertRaises(status.InvalidCredentialsException):
            self.auth.login('a@example.com', 'wrong')
        with self.assertRaises(status.InvalidCredentialsException):
            self.auth.login('b@example.com', 'secret1')

    def test_require_user(self):
        with self.assertRaises(status.NotAuthenticatedException):
            self.auth.require_user()
        user = self.auth.register('a@example.com', 'secret1', 'Ann')
        self.assertEqual(self.auth.require_user()['id'], user['id'])

    def test_signed_in_user_survives_restart(self):
        user = self.auth.register('a@example.com', 'secret1', 'Ann')
        self.assertEqual(AuthService(self.store).current_user()['id'], user['id'])

    def test_auth_state_callbacks(self):
        received = []
        unsubscribe = self.auth.on_auth_state_changed(received.append)
        self.assertEqual(received, [None])

        user = self.auth.register('a@example.com', 'secret1', 'Ann')
        self.auth.logout()
        self.assertEqual(received, [None, user, None])

        unsubscribe()
        self.auth.login('a@example.com', 'secret1')
        self.assertEqual(len(received), 3)
        unsubscribe()

    def test_update_profile(self):
        user = self.auth.register('a@example.com', 'secret1', 'Ann')
        updated = self.auth.update_profile(user['id'], {
            'displayName': 'Anna',
            'id': 'hijack',
            'password': 'bypass',
            'createdAt': 'never',
        })

        self.assertEqual(updated['displayName'], 'Anna')
        self.assertEqual(updated['id'], user['id'])
        self.assertEqual(updated['password'], 'secret1')
        self.assertEqual(updated['createdAt'], user['createdAt'])
        self.assertIn('updatedAt', updated)
        self.assertEqual(self.auth.current_user()['displayName'], 'Anna')

    def test_update_profile_unknown_user(self):
        with self.assertRaises(status.UserNotFoundException):
            self.auth.update_profile('missing', {'displayName': 'X'})

    def test_change_password(self):
        user = self.auth.register('a@example.com', 'secret1', 'Ann')

        with self.assertRaises(status.InvalidCredentialsException):
            self.auth.change_password(user['id'], 'wrong', 'newsecret')
        with self.assertRaises(status.PasswordInvalidException):
            self.auth.change_password(user['id'], 'secret1', '123')
        with self.assertRaises(status.UserNotFoundException):
            self.auth.change_password('missing', 'secret1', 'newsecret')

        self.auth.change_password(user['id'], 'secret1', 'newsecret')
        self.auth.logout()
        with self.assertRaises(status.InvalidCredentialsException):
            self.auth.login('a@example.com', 'secret1')
        self.assertEqual(self.auth.login('a@example.com', 'newsecret')['id'], user['id'])

    def test_minimum_password_length_is_configurable(self):
        auth = AuthService(self.store, min_password_length=2)
        user = auth.register('a@example.com', 'secret1', 'Ann')
        auth.change_password(user['id'], 'secret1', 'ab')
