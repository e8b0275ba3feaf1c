import unittest
from datetime import date

from patrimony.pipeline.performance import (
    build_performance,
    compute_performance,
    monthly_net_cash_flow,
    performance_months,
)


def _snap(on: str, value: float, category="ACOES"):
    return {"id": f"{category}-{on}", "date": date.fromisoformat(on), "total_value": value, "category": category}


def _tx(on: str, amount: float, kind="TOP_UP", category="ACOES"):
    return {"id": f"tx-{on}-{amount}", "asset_id": "a1", "category": category, "amount": amount, "date": date.fromisoformat(on), "kind": kind}


class ComputePerformanceTests(unittest.TestCase):
    def test_deposit_is_removed_from_growth(self):
        snaps = [_snap("2024-01-15", 1000.0), _snap("2024-02-15", 1200.0)]
        result = compute_performance("ACOES", snaps, [_tx("2024-02-10", 150.0)])
        self.assertAlmostEqual(result["delta_value"], 50.0)
        self.assertAlmostEqual(result["percent_change"], 5.0)
        self.assertEqual(result["current_value"], 1200.0)
        self.assertEqual(result["label"], "Ações")

    def test_offsetting_deposit_cancels_jump(self):
        snaps = [_snap("2024-01-15", 1000.0), _snap("2024-02-15", 1500.0)]
        result = compute_performance("ACOES", snaps, [_tx("2024-02-01", 500.0)])
        self.assertAlmostEqual(result["delta_value"], 0.0)
        self.assertAlmostEqual(result["percent_change"], 0.0)

    def test_withdrawal_is_added_back(self):
        snaps = [_snap("2024-01-15", 1000.0), _snap("2024-02-15", 900.0)]
        result = compute_performance("ACOES", snaps, [_tx("2024-02-03", 200.0, kind="WITHDRAW")])
        self.assertAlmostEqual(result["delta_value"], 100.0)
        self.assertAlmostEqual(result["percent_change"], 10.0)

    def test_zero_adjusted_previous_has_no_percent(self):
        snaps = [_snap("2024-01-15", 1000.0), _snap("2024-02-15", 1100.0)]
        result = compute_performance("ACOES", snaps, [_tx("2024-01-02", 1000.0)])
        self.assertIsNone(result["percent_change"])
        self.assertAlmostEqual(result["delta_value"], 1100.0)

    def test_month_funded_by_deposits_nets_to_zero(self):
        snaps = [_snap("2024-01-20", 300.30), _snap("2024-02-20", 310.0)]
        txs = [_tx("2024-01-03", 100.10), _tx("2024-01-09", 200.20)]
        result = compute_performance("ACOES", snaps, txs)
        self.assertIsNone(result["percent_change"])
        self.assertEqual(result["delta_value"], 310.0)
        self.assertEqual(result["current_value"], 310.0)

    def test_single_month_is_insufficient(self):
        snaps = [_snap("2024-02-01", 800.0), _snap("2024-02-20", 900.0)]
        result = compute_performance("ACOES", snaps, [])
        self.assertIsNone(result["percent_change"])
        self.assertIsNone(result["delta_value"])
        self.assertEqual(result["current_value"], 900.0)
        result = compute_performance("ACOES", snaps, [], distribution_value=950.0)
        self.assertEqual(result["current_value"], 950.0)

    def test_no_history(self):
        result = compute_performance("ACOES", [], [])
        self.assertIsNone(result["percent_change"])
        self.assertIsNone(result["delta_value"])
        self.assertIsNone(result["current_value"])

    def test_distribution_value_is_displayed_not_adjusted(self):
        snaps = [_snap("2024-01-15", 1000.0), _snap("2024-02-15", 1200.0)]
        result = compute_performance("ACOES", snaps, [_tx("2024-02-10", 150.0)], distribution_value=1300.0)
        self.assertEqual(result["current_value"], 1300.0)
        self.assertAlmostEqual(result["percent_change"], 5.0)

    def test_uses_peak_of_month_and_latest_two_months(self):
        snaps = [
            _snap("2023-12-15", 10.0),
            _snap("2024-01-15", 1000.0),
            _snap("2024-02-05", 1200.0),
            _snap("2024-02-25", 1100.0),
        ]
        result = compute_performance("ACOES", snaps, [])
        self.assertAlmostEqual(result["delta_value"], 200.0)
        self.assertAlmostEqual(result["percent_change"], 20.0)

    def test_other_categories_are_ignored(self):
        snaps = [
            _snap("2024-01-15", 1000.0),
            _snap("2024-02-15", 1100.0),
            _snap("2024-02-16", 9999.0, category="CARROS"),
        ]
        txs = [_tx("2024-02-10", 100.0, category="CARROS")]
        result = compute_performance("ACOES", snaps, txs)
        self.assertAlmostEqual(result["delta_value"], 100.0)


class HelperTests(unittest.TestCase):
    def test_monthly_net_cash_flow(self):
        flows = monthly_net_cash_flow(
            [
                _tx("2024-02-01", 100.0),
                _tx("2024-02-20", 30.0, kind="WITHDRAW"),
                _tx("2024-03-01", 10.0),
            ]
        )
        self.assertEqual(flows[("ACOES", 2024, 2)], 70.0)
        self.assertEqual(flows[("ACOES", 2024, 3)], 10.0)

    def test_build_performance_covers_tracked_categories(self):
        snaps = [_snap("2024-01-15", 1000.0), _snap("2024-02-15", 1100.0)]
        dist = [{"category": "RENDA_FIXA_POS", "label": "Renda Fixa Pós", "raw_value": 400.0, "percent": 100.0}]
        rows = build_performance(snaps, [], dist)
        self.assertEqual([r["category"] for r in rows], ["RENDA_FIXA_POS", "RENDA_FIXA_IPCA", "ACOES"])
        self.assertEqual(rows[0]["current_value"], 400.0)
        self.assertIsNone(rows[0]["percent_change"])
        self.assertIsNone(rows[1]["current_value"])
        self.assertAlmostEqual(rows[2]["percent_change"], 10.0)

    def test_performance_months(self):
        snaps = [
            _snap("2024-01-15", 1.0),
            _snap("2024-02-15", 1.0),
            _snap("2024-03-15", 1.0),
            _snap("2024-03-20", 1.0, category="RENDA_FIXA_POS"),
            _snap("2023-01-20", 1.0, category="CARROS"),
        ]
        self.assertEqual(performance_months(snaps), {(2024, 2), (2024, 3)})
        self.assertEqual(performance_months([], now=date(2024, 7, 4)), {(2024, 7)})


if __name__ == "__main__":
    unittest.main()
