"""January 2026 meal records shared by the report tests.

Guest service days are Mon/Wed/Fri/Sat. Jan 1 2026 is a Thursday.

    guest 460, extra 25, rv 340 (Wed/Sat 140, Mon/Thu 200), day_worker 50,
    shelter 20, united_effort 0, lunch_bag 100  -> 995
"""
from shelter.logic.reporting.classifier import classify, group_by_category

GUEST_DAYS = [2, 3, 5, 7, 9, 10, 12, 14, 16, 17, 19, 21, 23, 24, 26, 28, 30, 31]
WED_SAT = [3, 7, 10, 14, 17, 21, 24]
MON_THU = [1, 5, 8, 12, 15, 19, 22, 26]


def _day(d):
    return f"2026-01-{d:02d}"


def january_2026_records():
    raw = []
    for i in range(46):
        raw.append({'id': f'g{i}', 'date': _day(GUEST_DAYS[i % len(GUEST_DAYS)]), 'count': 10,
                    'category': 'guest', 'guest_id': f'guest-{i % 6}'})
    for i, d in enumerate([2, 7, 14, 23, 31]):
        raw.append({'id': f'x{i}', 'date': _day(d), 'count': 5, 'type': 'extra_meal', 'guest_id': 'guest-1'})
    for i, d in enumerate(WED_SAT):
        raw.append({'id': f'rvws{i}', 'date': _day(d), 'count': 20, 'type': 'rv_delivery'})
    for i, d in enumerate(MON_THU):
        raw.append({'id': f'rvmt{i}', 'date': _day(d), 'count': 25, 'category': 'rv'})
    # 11:00 on Saturday Jan 10 in Los Angeles
    raw.append({'id': 'dw0', 'date': '2026-01-10T19:00:00.000Z', 'count': 50, 'type': 'dayworker'})
    for i, d in enumerate([4, 6, 11, 18]):
        raw.append({'id': f'sh{i}', 'date': _day(d), 'count': 5, 'category': 'shelter'})
    raw.append({'id': 'lb0', 'date': _day(5), 'count': 100, 'type': 'lunch_bags'})
    return [classify(r) for r in raw]


def january_2026_by_category(extra_records=()):
    return group_by_category(january_2026_records() + [classify(r) for r in extra_records])
