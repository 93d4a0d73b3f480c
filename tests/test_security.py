import unittest
from sqlalchemy import create_engine
from vdp_admin.data.database import SettingsRepository, init_db
from vdp_admin.security import (
    AuthError, AuthService, CredentialStore, ValidationError, ADMIN_ROLE,
    DEFAULT_PASSWORD, DEFAULT_USERNAME, MSG_BAD_CREDENTIALS, is_strong_password,
)

class TestAuthService(unittest.TestCase):
    def setUp(self):
        engine = create_engine('sqlite:///:memory:')
        init_db(engine)
        self.repo = SettingsRepository(engine)
        self.store = CredentialStore(self.repo)
        self.auth = AuthService(self.store)

    # === login ===
    def test_defaults_when_nothing_stored(self):
        self.assertEqual(self.store.username, DEFAULT_USERNAME)
        self.assertEqual(self.store.password, DEFAULT_PASSWORD)
        self.assertEqual(self.store.api_key, '')

    def test_login_with_defaults(self):
        session = self.auth.login('admin', 'admin123')
        self.assertEqual(session.username, 'admin')
        self.assertEqual(session.role, ADMIN_ROLE)
        self.assertTrue(self.auth.is_authenticated)

    def test_login_mismatch_same_message(self):
        """Le message ne révèle pas quel champ est faux"""
        messages = []
        for user, pwd in (('admin', 'wrong'), ('wrong', 'admin123'), ('wrong', 'wrong'), ('admin ', 'admin123')):
            with self.assertRaises(AuthError) as ctx:
                self.auth.login(user, pwd)
            messages.append(str(ctx.exception))
        self.assertEqual(set(messages), {MSG_BAD_CREDENTIALS})
        self.assertFalse(self.auth.is_authenticated)

    def test_login_uses_stored_values(self):
        self.repo.set('admin_username', 'operateur')
        self.repo.set('admin_password', 'S3cret!pass')
        with self.assertRaises(AuthError):
            self.auth.login('admin', 'admin123')
        self.assertEqual(self.auth.login('operateur', 'S3cret!pass').username, 'operateur')

    # === logout ===
    def test_logout_needs_confirmation(self):
        self.auth.login('admin', 'admin123')
        self.assertFalse(self.auth.confirm_logout())
        self.assertTrue(self.auth.is_authenticated)
        self.auth.request_logout()
        self.assertTrue(self.auth.logout_pending)
        self.assertTrue(self.auth.confirm_logout())
        self.assertFalse(self.auth.is_authenticated)
        self.assertFalse(self.auth.logout_pending)

    def test_logout_cancel_keeps_session(self):
        self.auth.login('admin', 'admin123')
        self.auth.request_logout()
        self.auth.cancel_logout()
        self.assertFalse(self.auth.confirm_logout())
        self.assertTrue(self.auth.is_authenticated)

    # === username ===
    def test_update_username_too_short(self):
        with self.assertRaises(ValidationError):
            self.auth.update_username('ab')
        with self.assertRaises(ValidationError):
            self.auth.update_username('  ab   ')
        self.assertIsNone(self.repo.get('admin_username'))

    def test_update_username_persists_and_updates_session(self):
        self.auth.login('admin', 'admin123')
        self.assertEqual(self.auth.update_username('  abc '), 'abc')
        self.assertEqual(self.repo.get('admin_username'), 'abc')
        self.assertEqual(self.auth.session.username, 'abc')
        self.auth.request_logout(); self.auth.confirm_logout()
        self.assertEqual(self.auth.login('abc', 'admin123').username, 'abc')

    # === password ===
    def test_password_policy(self):
        self.assertFalse(is_strong_password('abc'))
        self.assertFalse(is_strong_password('abcdefg1'))
        self.assertFalse(is_strong_password('abcdefg!'))
        self.assertFalse(is_strong_password('12345678!'))
        self.assertFalse(is_strong_password('ab1!'))
        self.assertTrue(is_strong_password('abcdefg1!'))
        self.assertTrue(is_strong_password('P4ss{word}'))

    def test_update_password(self):
        with self.assertRaises(ValidationError):
            self.auth.update_password('abc')
        with self.assertRaises(ValidationError):
            self.auth.update_password('abcdefg1')
        self.assertIsNone(self.repo.get('admin_password'))
        self.auth.update_password('abcdefg1!')
        self.assertEqual(self.repo.get('admin_password'), 'abcdefg1!')
        self.assertTrue(self.store.matches('admin', 'abcdefg1!'))

    # === api key ===
    def test_save_api_key(self):
        with self.assertRaises(ValidationError):
            self.auth.save_api_key('x' * 31)
        self.assertEqual(self.store.api_key, '')
        self.auth.save_api_key('x' * 32)
        self.assertEqual(self.store.api_key, 'x' * 32)

if __name__ == "__main__":
    unittest.main()
