"""
Tests for the compute_invoice_summary and compute_financial_summary tool
handlers.
"""

from unittest.mock import patch

from config import get_config
from tools.financial_summary import compute_financial_summary
from tools.invoice_summary import compute_invoice_summary


class TestComputeInvoiceSummary:
    """Tests for compute_invoice_summary."""

    def test_stored_invoice_with_client(self, raw_records):
        result = compute_invoice_summary(
            {
                "invoice": {
                    "_id": "inv1",
                    "clientId": {"_id": "c1"},
                    "candidates": [{"candidateId": {"_id": "k4"}, "designation": "Engineer", "ctc": 1200000}],
                },
                "client": raw_records["clients"][0],
            }
        )

        assert result["lines"] == [
            {"candidate_id": "k4", "designation": "Engineer", "ctc": 1200000, "amount": 99960}
        ]
        assert result["payout_option"] == "Percentage"
        assert result["billing_state"] == "Karnataka"
        assert result["tax"]["cgst"] == 8996
        assert result["grand_total"] == 117952
        assert result["amount_in_words"] == "One Lakh Seventeen Thousand Nine Hundred and Fifty Two Only"

    def test_free_standing_lines(self):
        result = compute_invoice_summary(
            {
                "lines": [{"ctc": 100}],
                "payout_option": "Both",
                "agreement_percentage": "0.5",
                "flat_pay_amount": 0.5,
                "billing_state": "Delhi",
            }
        )

        assert result["subtotal"] == 2
        assert result["tax"]["igst"] == 0
        assert result["grand_total"] == 2

    def test_negative_ctc_renders_minus_words(self):
        """A negative CTC yields a credit total instead of an error."""
        result = compute_invoice_summary(
            {
                "lines": [{"ctc": -100000}],
                "payout_option": "Percentage",
                "agreement_percentage": 10,
                "billing_state": "Delhi",
            }
        )

        assert "error" not in result
        assert result["subtotal"] == -10000
        assert result["tax"]["igst"] == -1800
        assert result["grand_total"] == -11800
        assert result["amount_in_words"] == "Minus Eleven Thousand Eight Hundred Only"

    def test_exponent_ctc_counts_as_zero(self):
        """A CTC far outside any money range is treated as 0."""
        result = compute_invoice_summary(
            {
                "lines": [{"ctc": "1e40"}],
                "payout_option": "Percentage",
                "agreement_percentage": 10,
                "billing_state": "Delhi",
            }
        )

        assert "error" not in result
        assert result["grand_total"] == 0
        assert result["amount_in_words"] == "Zero Only"

    def test_home_state_override(self):
        result = compute_invoice_summary(
            {"lines": [{"ctc": 1000000}], "agreement_percentage": 10, "billing_state": "Delhi", "home_state": "Delhi"}
        )
        assert result["tax"]["intra_state"] is True
        assert result["tax"]["cgst"] == 9000

    def test_home_state_from_config(self, monkeypatch):
        monkeypatch.setattr(get_config(), "home_state", "Delhi")
        result = compute_invoice_summary({"lines": [{"ctc": 1000000}], "agreement_percentage": 10, "billing_state": "Delhi"})
        assert result["tax"]["intra_state"] is True

    def test_neither_invoice_nor_lines(self):
        result = compute_invoice_summary({})
        assert result == {
            "error": {"code": "VALIDATION_ERROR", "message": "Either invoice or lines is required", "retryable": False}
        }

    def test_both_invoice_and_lines(self):
        result = compute_invoice_summary({"invoice": {}, "lines": []})
        assert result["error"]["message"] == "Provide invoice or lines, not both"

    def test_internal_error(self):
        with patch("tools.invoice_summary.summarize_lines", side_effect=ValueError("bad")):
            result = compute_invoice_summary({"lines": []})
        assert result["error"]["message"] == "Internal error: bad"


class TestComputeFinancialSummary:
    """Tests for compute_financial_summary."""

    ARGS = {
        "payments": [
            {"amountReceived": 1000, "receivedDate": "2025-03-18T10:00:00"},
            {"amountReceived": 2000, "receivedDate": "2025-02-25"},
            {"amountReceived": 100},
        ],
        "expenses": [{"amount": 300, "date": "2025-03-19"}],
        "now": "2025-03-20T12:00:00",
    }

    def test_monthly(self):
        result = compute_financial_summary({**self.ARGS, "period": "Monthly"})

        assert result == {
            "period": "monthly",
            "since": "2025-02-20T12:00:00",
            "total_income": 3000,
            "total_expenses": 300,
            "net_profit": 2700,
            "profit_margin": 90.0,
        }

    def test_all_time_default(self):
        result = compute_financial_summary(self.ARGS)

        assert result["period"] == "all"
        assert result["since"] is None
        assert result["total_income"] == 3100

    def test_unknown_period(self):
        result = compute_financial_summary({**self.ARGS, "period": "quarterly"})

        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert result["error"]["message"].startswith("Invalid period:")
