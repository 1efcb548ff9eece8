import unittest
from datetime import datetime, timezone

from report_fixture import january_2026_by_category

from shelter.infra.pdf_utils import generate_pdf_for_month
from shelter.logic.reporting.aggregation import monthly_meal_report


class TestMonthlyPdf(unittest.TestCase):

    def test_pdf_bytes(self):
        now = datetime(2026, 2, 15, 20, 0, tzinfo=timezone.utc)
        report = monthly_meal_report(january_2026_by_category(), 2026, 0, now=now)
        pdf = generate_pdf_for_month(report)
        self.assertTrue(pdf.startswith(b"%PDF"))
        self.assertGreater(len(pdf), 500)

    def test_empty_month_still_renders(self):
        report = monthly_meal_report({}, 2026, 5, now=datetime(2026, 7, 1, tzinfo=timezone.utc))
        self.assertEqual(report['pdf']['total'], 0)
        self.assertTrue(generate_pdf_for_month(report).startswith(b"%PDF"))
