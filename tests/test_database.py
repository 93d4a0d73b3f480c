import unittest
from sqlalchemy import create_engine, text
from unittest import mock
from vdp_admin.data.database import SettingsRepository, get_setting, init_db, set_setting

class TestSettingsRepository(unittest.TestCase):
    def setUp(self):
        # fresh in-memory database for every test
        self.engine = create_engine('sqlite:///:memory:')
        init_db(self.engine)
        self.repo = SettingsRepository(self.engine)

    def test_missing_key_returns_none(self):
        """Une clé absente renvoie None"""
        self.assertIsNone(self.repo.get('admin_username'))

    def test_set_then_get(self):
        self.repo.set('admin_username', 'operateur')
        self.assertEqual(self.repo.get('admin_username'), 'operateur')

    def test_set_overwrites_existing_value(self):
        """Une seconde écriture remplace la valeur (upsert)"""
        self.repo.set('api_key', 'a' * 32)
        self.repo.set('api_key', 'b' * 40)
        self.assertEqual(self.repo.get('api_key'), 'b' * 40)
        with self.engine.connect() as conn:
            count = conn.execute(text("SELECT COUNT(*) FROM app_settings WHERE key='api_key'")).scalar()
        self.assertEqual(count, 1)

    def test_set_none_deletes(self):
        self.repo.set('api_base', 'http://example.test')
        self.repo.set('api_base', None)
        self.assertIsNone(self.repo.get('api_base'))

    def test_module_helpers_use_default_engine(self):
        with mock.patch("vdp_admin.data.database.ENGINE", self.engine):
            set_setting('send_api_key', '1')
            self.assertEqual(get_setting('send_api_key'), '1')
            set_setting('send_api_key', None)
            self.assertIsNone(get_setting('send_api_key'))

if __name__ == "__main__":
    unittest.main()
