import unittest
from datetime import datetime, timezone

from report_fixture import january_2026_by_category, january_2026_records

from shelter.logic.reporting.aggregation import (
    sum_counts, trend_totals, pdf_totals, summary_totals, monthly_meal_report, build_trend_series,
)
from shelter.logic.reporting.classifier import classify, normalize_category, group_by_category
from shelter.logic.reporting.filters import trend_filter, pdf_filter, summary_filter, catch_all
from shelter.logic.reporting.service_days import count_service_days, elapsed_service_days
from shelter.utilities.constants import (
    MEAL_CATEGORIES, MONDAY, WEDNESDAY, FRIDAY, SATURDAY, RV_CATCH_ALL_LABEL, PDF_RV_SHELTER_LABEL,
)

JANUARY = 0
AFTER_JANUARY = datetime(2026, 2, 15, 20, 0, tzinfo=timezone.utc)
SERVICE_DAYS = {MONDAY, WEDNESDAY, FRIDAY, SATURDAY}


class TestClassifier(unittest.TestCase):

    def test_aliases_map_to_canonical_categories(self):
        self.assertEqual(normalize_category("RV_Delivery"), "rv")
        self.assertEqual(normalize_category("lunch-bag"), "lunch_bag")
        self.assertIsNone(normalize_category("soup"))

    def test_unknown_tag_falls_back_to_default(self):
        self.assertEqual(classify({'type': 'soup'}, default_category='shelter').category, 'shelter')
        self.assertEqual(classify({}).category, 'guest')

    def test_group_by_category_has_every_key(self):
        grouped = group_by_category([classify({'category': 'rv', 'count': 3})])
        self.assertEqual(set(grouped), set(MEAL_CATEGORIES))
        self.assertEqual(len(grouped['rv']), 1)


class TestFilters(unittest.TestCase):

    def test_trend_keeps_bulk_records_on_any_day(self):
        thursday_rv = [classify({'date': '2026-01-15', 'count': 5, 'category': 'rv'})]
        self.assertEqual(len(trend_filter(thursday_rv, 2026, JANUARY, SERVICE_DAYS, True)), 1)
        self.assertEqual(len(trend_filter(thursday_rv, 2026, JANUARY, SERVICE_DAYS, False)), 0)

    def test_every_policy_drops_unreadable_dates_and_other_months(self):
        records = [classify({'date': 'garbage', 'count': 5}), classify({'date': '2026-02-02', 'count': 5})]
        self.assertEqual(pdf_filter(records, 2026, JANUARY), [])
        self.assertEqual(summary_filter(records, 2026, JANUARY), [])
        self.assertEqual(trend_filter(records, 2026, JANUARY, SERVICE_DAYS, True), [])

    def test_filters_accept_plain_dicts(self):
        self.assertEqual(len(pdf_filter([{'date': '2026-01-03', 'count': 1}], 2026, JANUARY)), 1)

    def test_catch_all(self):
        self.assertEqual(catch_all(370, [140, 200]), 30)
        self.assertEqual(catch_all(340, [140, 200]), 0)

    def test_sum_counts_ignores_bad_counts(self):
        records = [{'count': 3}, {'count': None}, {'count': -4}, {'count': 'x'}, {'count': '2'}]
        self.assertEqual(sum_counts(records), 5)


class TestMonthlyReport(unittest.TestCase):

    def setUp(self):
        self.by_category = january_2026_by_category()

    def test_trend_totals(self):
        trend = trend_totals(self.by_category, 2026, JANUARY)
        self.assertEqual(trend['categories']['guest'], 460)
        self.assertEqual(trend['categories']['rv'], 340)
        self.assertEqual(trend['categories']['united_effort'], 0)
        self.assertEqual(trend['total'], 995)

    def test_pdf_combines_rv_and_shelter(self):
        pdf = pdf_totals(self.by_category, 2026, JANUARY)
        rows = {r['label']: r['count'] for r in pdf['rows']}
        self.assertEqual(rows[PDF_RV_SHELTER_LABEL], 360)
        self.assertEqual(pdf['total'], 995)

    def test_summary_buckets_and_subtotals(self):
        summary = summary_totals(self.by_category, 2026, JANUARY, now=AFTER_JANUARY)
        self.assertEqual(summary['rv_buckets'], {'Wed/Sat': 140, 'Mon/Thu': 200, RV_CATCH_ALL_LABEL: 0})
        self.assertEqual(summary['rv_total'], 340)
        self.assertEqual(summary['total_hot_meals'], 895)
        self.assertEqual(summary['lunch_bags'], 100)
        self.assertEqual(summary['total'], 995)
        self.assertEqual(summary['unique_guests'], 6)
        self.assertEqual(summary['elapsed_service_days'], 18)
        self.assertEqual(summary['avg_unique_guests_per_service_day'], 1.0)

    def test_three_views_agree(self):
        report = monthly_meal_report(self.by_category, 2026, JANUARY, now=AFTER_JANUARY)
        self.assertEqual(report['title'], "January 2026")
        self.assertTrue(report['consistent'])
        self.assertEqual(report['trend']['total'], report['pdf']['total'])
        self.assertEqual(report['pdf']['total'], report['summary']['total'])

    def test_rv_outside_named_groups_lands_in_catch_all(self):
        tuesday_rv = {'id': 'rvtue', 'date': '2026-01-06', 'count': 30, 'category': 'rv'}
        by_category = january_2026_by_category([tuesday_rv])
        report = monthly_meal_report(by_category, 2026, JANUARY, now=AFTER_JANUARY)
        self.assertEqual(report['summary']['rv_buckets'][RV_CATCH_ALL_LABEL], 30)
        self.assertEqual(report['summary']['rv_total'], 370)
        self.assertEqual(report['trend']['total'], 1025)
        self.assertTrue(report['consistent'])

    def test_off_day_guest_meal_only_in_pdf(self):
        tuesday_guest = {'id': 'gtue', 'date': '2026-01-06', 'count': 10, 'category': 'guest',
                         'guest_id': 'guest-9'}
        report = monthly_meal_report(january_2026_by_category([tuesday_guest]), 2026, JANUARY, now=AFTER_JANUARY)
        self.assertEqual(report['trend']['total'], 995)
        self.assertEqual(report['summary']['total'], 995)
        self.assertEqual(report['summary']['unique_guests'], 6)
        self.assertEqual(report['pdf']['total'], 1005)
        self.assertEqual(report['pdf']['categories']['guest'], 470)
        self.assertFalse(report['consistent'])

    def test_late_night_utc_record_counts_in_january(self):
        late = {'id': 'sh-late', 'date': '2026-02-01T05:00:00.000Z', 'count': 7, 'category': 'shelter'}
        report = monthly_meal_report(january_2026_by_category([late]), 2026, JANUARY, now=AFTER_JANUARY)
        self.assertEqual(report['pdf']['categories']['shelter'], 27)
        self.assertTrue(report['consistent'])

    def test_trend_series_stops_at_current_month(self):
        now = datetime(2026, 3, 10, 18, 0, tzinfo=timezone.utc)
        series = build_trend_series(self.by_category, 2026, now)
        self.assertEqual([p['label'] for p in series], ["Jan", "Feb", "Mar"])
        self.assertEqual(series[0]['total'], 995)
        self.assertEqual(series[1]['total'], 0)
        self.assertEqual(build_trend_series(self.by_category, 2027, now), [])

    def test_fixture_sanity(self):
        self.assertEqual(sum_counts(january_2026_records()), 995)


class TestServiceDays(unittest.TestCase):

    def test_full_month(self):
        self.assertEqual(count_service_days(2026, JANUARY, SERVICE_DAYS), 18)

    def test_through_day(self):
        # Jan 1 (Thu) .. Jan 5 (Mon): Fri 2, Sat 3, Mon 5
        self.assertEqual(count_service_days(2026, JANUARY, SERVICE_DAYS, through_day=5), 3)

    def test_elapsed_for_current_past_and_future_months(self):
        now = datetime(2026, 1, 6, 18, 0, tzinfo=timezone.utc)
        self.assertEqual(elapsed_service_days(2026, JANUARY, SERVICE_DAYS, now), 3)
        self.assertEqual(elapsed_service_days(2025, 11, SERVICE_DAYS, now), count_service_days(2025, 11, SERVICE_DAYS))
        self.assertEqual(elapsed_service_days(2026, 1, SERVICE_DAYS, now), 0)

    def test_elapsed_reaches_full_count_on_last_service_day(self):
        # Saturday Jan 31, noon in Los Angeles
        last_day = datetime(2026, 1, 31, 20, 0, tzinfo=timezone.utc)
        self.assertEqual(elapsed_service_days(2026, JANUARY, SERVICE_DAYS, last_day),
                         count_service_days(2026, JANUARY, SERVICE_DAYS))
        self.assertEqual(elapsed_service_days(2026, JANUARY, SERVICE_DAYS, last_day), 18)
        # 21:00 on Jan 31 in Los Angeles is already February in UTC
        late = datetime(2026, 2, 1, 5, 0, tzinfo=timezone.utc)
        self.assertEqual(elapsed_service_days(2026, JANUARY, SERVICE_DAYS, late), 18)

    def test_elapsed_day_before_last_service_day(self):
        friday = datetime(2026, 1, 30, 20, 0, tzinfo=timezone.utc)
        self.assertEqual(elapsed_service_days(2026, JANUARY, SERVICE_DAYS, friday), 17)

    def test_empty_day_set(self):
        self.assertEqual(count_service_days(2026, JANUARY, ()), 0)
