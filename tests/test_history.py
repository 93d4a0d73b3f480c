import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path
from vdp_admin.history import History, LicenseRecord

def make(key: str, mac: str = 'Globale', exp: str = '2027-01-01') -> LicenseRecord:
    return LicenseRecord(licenseKey=key, expirationDate=exp, macAddress=mac, createdAt='2026-01-01T00:00:00.000Z')

class TestHistory(unittest.TestCase):
    def setUp(self):
        self.history = History()

    def test_newest_first(self):
        a = self.history.record_success(make('VDP-AAAAAAAA-GLB-1'))
        b = self.history.record_success(make('VDP-BBBBBBBB-GLB-2'))
        self.assertEqual([r.licenseKey for r in self.history.items], [b.licenseKey, a.licenseKey])

    def test_record_success_sets_timestamp(self):
        """Le timestamp client est ajouté, createdAt reste celui du serveur"""
        original = make('VDP-AAAAAAAA-GLB-1')
        enriched = self.history.record_success(original, now=datetime(2026, 10, 19, 14, 5, 9))
        self.assertEqual(enriched.timestamp, '19/10/2026 14:05:09')
        self.assertEqual(enriched.createdAt, '2026-01-01T00:00:00.000Z')
        self.assertIsNone(original.timestamp)

    def test_search(self):
        self.history.record_success(make('VDP-12345678-GLB-7', 'Globale'))
        self.history.record_success(make('VDP-ABCDEF01-AA1122-3', 'AA1122'))
        res = self.history.search('glb')
        # "glb" matches the key of the global license
        self.assertEqual([r.macAddress for r in res], ['Globale'])
        res = self.history.search('aa11')
        self.assertEqual([r.macAddress for r in res], ['AA1122'])
        self.assertEqual(len(self.history.search('')), 2)
        self.assertEqual(len(self.history.search(None)), 2)
        self.assertEqual(self.history.search('zzz'), [])

    def test_search_mac_and_global_literal(self):
        self.history.record_success(make('VDP-11111111-XYZ-1', 'Globale'))
        self.history.record_success(make('VDP-22222222-XYZ-2', 'AA1122'))
        self.assertEqual([r.macAddress for r in self.history.search('AA1122')], ['AA1122'])
        self.assertEqual([r.macAddress for r in self.history.search('globale')], ['Globale'])

    def test_stats(self):
        self.history.record_success(make('K1', 'AA:BB:CC:00:11:22'))
        self.history.record_success(make('K2', 'AA1122'))
        self.history.record_success(make('K3', 'Globale'))
        self.assertEqual(self.history.stats(), {"total": 3, "hardwareBound": 2, "global": 1})
        self.assertEqual(History().stats(), {"total": 0, "hardwareBound": 0, "global": 0})

    def test_delete_by_identity(self):
        """Deux licences identiques restent deux entrées distinctes"""
        first = self.history.record_success(make('SAME'))
        second = self.history.record_success(make('SAME'))
        self.assertTrue(self.history.delete(first))
        self.assertEqual(len(self.history), 1)
        self.assertIs(self.history.items[0], second)
        self.assertFalse(self.history.delete(first))

    def test_delete_filtered_resolves_view_index(self):
        self.history.record_success(make('VDP-AAAAAAAA-GLB-1', 'Globale'))
        target = self.history.record_success(make('VDP-BBBBBBBB-AA1122-2', 'AA1122'))
        self.history.record_success(make('VDP-CCCCCCCC-GLB-3', 'Globale'))
        # base list: C, B, A ; view for "aa11": B only
        removed = self.history.delete_filtered('aa11', 0)
        self.assertIs(removed, target)
        self.assertEqual([r.licenseKey for r in self.history.items], ['VDP-CCCCCCCC-GLB-3', 'VDP-AAAAAAAA-GLB-1'])
        self.assertIsNone(self.history.delete_filtered('aa11', 0))

    def test_export_csv_empty(self):
        self.assertIsNone(self.history.export_csv())
        with tempfile.TemporaryDirectory() as d:
            self.assertIsNone(self.history.write_csv(d))
            self.assertEqual(list(Path(d).iterdir()), [])

    def test_export_csv(self):
        self.history.record_success(make('K1', 'Globale', '2027-01-01'), now=datetime(2026, 1, 1, 8, 0, 0))
        self.history.record_success(make('K2', 'AA1122', '2027-02-01'), now=datetime(2026, 1, 2, 9, 30, 0))
        lines = self.history.export_csv().split("\n")
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[0], 'Date;Cle;MAC;Expiration')
        self.assertEqual(lines[1], '"02/01/2026 09:30:00";"K2";"AA1122";"2027-02-01"')
        self.assertEqual(lines[2], '"01/01/2026 08:00:00";"K1";"Globale";"2027-01-01"')

    def test_write_csv_file_name(self):
        self.history.record_success(make('K1'))
        with tempfile.TemporaryDirectory() as d:
            path = self.history.write_csv(d, today=date(2026, 10, 19))
            self.assertEqual(path.name, 'VDP_Licenses_2026-10-19.csv')
            content = path.read_text(encoding='utf-8')
            self.assertEqual(len(content.split("\n")), 2)

    def test_from_response(self):
        rec = LicenseRecord.from_response({
            "success": True, "licenseKey": "VDP-0A1B2C3D-GLB-5", "expirationDate": "2027-01-01",
            "macAddress": "Globale", "createdAt": "2026-01-01T00:00:00.000Z", "message": "Licence générée avec succès",
        })
        self.assertFalse(rec.is_hardware_bound)
        self.assertIsNone(rec.timestamp)
        self.assertEqual(rec.message, "Licence générée avec succès")

if __name__ == "__main__":
    unittest.main()
