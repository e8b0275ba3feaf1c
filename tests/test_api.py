import unittest

from fastapi.testclient import TestClient

from patrimony.api.routes import get_store
from patrimony.main import app

from tests.fakes import FakeStore, make_adapter


class ApiTests(unittest.TestCase):
    def setUp(self):
        self.fake = FakeStore()

        def _store():
            store = make_adapter(self.fake, attempts=1)
            try:
                yield store
            finally:
                store.close()

        app.dependency_overrides[get_store] = _store
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_health(self):
        r = self.client.get("/health")
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.json()["ok"])

    def test_overall_series(self):
        r = self.client.get("/subjects/alice/series/overall")
        self.assertEqual(r.status_code, 200)
        points = r.json()
        self.assertEqual(points[0]["date"], "2024-01-01")
        self.assertEqual(points[0]["value"], 1300.0)
        self.assertEqual(points[-1]["value"], 2000.0)
        self.assertIn("display_value", points[0])

    def test_unknown_view_is_404(self):
        r = self.client.get("/subjects/alice/series/IMOVEIS")
        self.assertEqual(r.status_code, 404)

    def test_distribution_hidden_query(self):
        r = self.client.get("/subjects/alice/distribution", params=[("hidden", "IMOVEIS")])
        self.assertEqual(r.status_code, 200)
        self.assertEqual([(row["category"], row["percent"]) for row in r.json()], [("ACOES", 100.0)])
        r = self.client.get("/subjects/alice/distribution")
        self.assertEqual([row["percent"] for row in r.json()], [62.5, 37.5])

    def test_performance(self):
        r = self.client.get("/subjects/alice/performance")
        self.assertEqual(r.status_code, 200)
        rows = {row["category"]: row for row in r.json()}
        self.assertEqual(set(rows), {"RENDA_FIXA_POS", "RENDA_FIXA_IPCA", "ACOES"})
        self.assertAlmostEqual(rows["ACOES"]["percent_change"], 5.0)
        self.assertAlmostEqual(rows["ACOES"]["delta_value"], 50.0)
        self.assertIsNone(rows["RENDA_FIXA_POS"]["percent_change"])
        self.assertIsNone(rows["RENDA_FIXA_POS"]["current_value"])

    def test_dashboard(self):
        r = self.client.get("/subjects/alice/dashboard", params=[("view", "acoes"), ("hidden", "IMOVEIS")])
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["view"], "ACOES")
        self.assertEqual(body["subject"], "alice")
        self.assertFalse(body["includes_hidden_note"])
        self.assertEqual(body["summary"]["top_category"]["category"], "ACOES")
        self.assertEqual(body["summary"]["display_total_value"], 550.0)
        self.assertEqual(body["series"][-1]["value"], 1250.0)


if __name__ == "__main__":
    unittest.main()
