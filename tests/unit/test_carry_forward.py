from __future__ import annotations

from stock_sheet.excel.blocks import locate_day_blocks
from stock_sheet.models.config_models import ActivityConfig, ReconcileConfig
from stock_sheet.models.row_data import SkipReason
from stock_sheet.services.carry_forward import collect_product_rows, reconcile_days

CONFIG = ReconcileConfig(source="memory")


def _run(sheet, config=CONFIG, carry=None):
    blocks = locate_day_blocks(sheet[0], max(len(r) for r in sheet))
    collected = collect_product_rows(list(enumerate(sheet))[1:])
    days, state = reconcile_days(blocks, collected.products, sheet[0], config, carry=carry)
    return days, state, collected


def test_end_to_end_scenario(scenario_sheet):
    days, carry, _ = _run(scenario_sheet)
    day1 = days[0].products[0]
    assert (day1.brought_forward, day1.received, day1.sold, day1.waste, day1.remain) == (10, 5, 3, 0, 12)
    day2 = days[1].products[0]
    assert (day2.brought_forward, day2.received, day2.sold, day2.waste, day2.remain) == (12, 3, 3, 0, 12)
    assert day2.date == "2 มี.ค."
    assert carry == {"BEV005": 12}


def test_conservation_and_continuity(make_sheet):
    sheet = make_sheet(
        4,
        [
            ("BEV", "B1", "Water", [["20", "4", "", "3", "2", "1"], ["", "6", "6", "10"], ["", "", "", "30"], ["", "2"]]),
            ("SNK", "S1", "Chips", [["", "12"], ["", "", "", "5", "", "2"], [], ["", "1,000", "", "", "", "-"]]),
        ],
    )
    days, _, _ = _run(sheet)
    for day in days:
        for r in day.products:
            assert r.remain == r.brought_forward + r.received - r.sold - r.waste
    for prev, cur in zip(days, days[1:]):
        prev_remain = {r.code: r.remain for r in prev.products}
        for r in cur.products:
            assert r.brought_forward == prev_remain[r.code]


def test_negative_remain_is_preserved(make_sheet):
    sheet = make_sheet(2, [("BEV", "B1", "Water", [["", "1", "", "5"], ["", "", "", "1"]])])
    days, carry, _ = _run(sheet)
    assert days[0].products[0].remain == -4
    assert days[1].products[0].brought_forward == -4
    assert carry["B1"] == -5


def test_day_one_seed_ignores_non_positive_sheet_value(make_sheet):
    sheet = make_sheet(1, [("BEV", "B1", "Water", [["-3", "2"]]), ("BEV", "B2", "Soda", [["0", "2"]])])
    days, _, _ = _run(sheet)
    assert [r.brought_forward for r in days[0].products] == [0, 0]
    assert [r.remain for r in days[0].products] == [2, 2]


def test_brought_forward_cell_after_day_one_does_not_override_carry(make_sheet):
    sheet = make_sheet(2, [("BEV", "B1", "Water", [["5"], ["100", "1"]])])
    days, _, _ = _run(sheet)
    assert days[1].products[0].brought_forward == 5
    assert days[1].products[0].remain == 6


def test_explicit_carry_is_passed_in_and_returned(scenario_sheet):
    start = {"BEV005": 50}
    days, carry, _ = _run(scenario_sheet, carry=start)
    # day 1 already has an entry -> sheet figure does not override
    assert days[0].products[0].brought_forward == 50
    assert carry is start
    assert carry["BEV005"] == 50 + 5 - 3 + 3 - 3


def test_fresh_state_per_run(scenario_sheet):
    first, _, _ = _run(scenario_sheet)
    second, _, _ = _run(scenario_sheet)
    assert first[0].products == second[0].products
    assert first[1].products == second[1].products


def test_rows_without_name_are_excluded_everywhere(make_sheet):
    sheet = make_sheet(
        2,
        [
            ("BEV", "B1", "Water", [["", "1"], ["", "1"]]),
            ("BEV", "B2", "", [["", "9"], ["", "9"]]),
            ("", "", "", []),
        ],
    )
    days, carry, collected = _run(sheet)
    for day in days:
        assert [r.code for r in day.products] == ["B1"]
    assert "B2" not in carry
    assert [s.reason for s in collected.skipped] == [SkipReason.MISSING_NAME, SkipReason.MISSING_CATEGORY]


def test_duplicate_code_keeps_first_row(make_sheet):
    sheet = make_sheet(1, [("BEV", "B1", "Water", [["", "1"]]), ("BEV", "B1", "Water copy", [["", "7"]])])
    days, _, collected = _run(sheet)
    assert len(days[0].products) == 1
    assert days[0].products[0].received == 1
    assert collected.skipped[0].reason is SkipReason.DUPLICATE_CODE
    assert collected.skipped[0].row_number == 2


def test_records_emitted_for_all_zero_products(make_sheet):
    sheet = make_sheet(2, [("BEV", "B1", "Water", [["", "1"]]), ("BEV", "B2", "Soda", [])])
    days, _, _ = _run(sheet)
    assert [r.code for r in days[1].products] == ["B1", "B2"]
    assert days[1].products[1].remain == 0


def test_carried_stock_marks_day_active_by_default(scenario_sheet):
    days, _, _ = _run(scenario_sheet)
    # day 3 は動きなしだが bf=12 / remain=12 を持つ
    assert [d.has_activity for d in days] == [True, True, True]
    assert (days[2].products[0].brought_forward, days[2].products[0].remain) == (12, 12)


def test_day_with_zero_stock_and_no_movement_is_inactive(make_sheet):
    sheet = make_sheet(3, [("BEV", "B1", "Water", [["", "2", "", "2"]])])
    days, _, _ = _run(sheet)
    assert [d.has_activity for d in days] == [True, False, False]


def test_activity_can_be_limited_to_sheet_movement(scenario_sheet):
    config = ReconcileConfig(source="memory", activity=ActivityConfig(include_carried_stock=False))
    days, _, _ = _run(scenario_sheet, config=config)
    assert [d.has_activity for d in days] == [True, True, False]


def test_days_processed_in_day_number_order(scenario_sheet):
    blocks = list(reversed(locate_day_blocks(scenario_sheet[0])))
    collected = collect_product_rows(list(enumerate(scenario_sheet))[1:])
    days, _ = reconcile_days(blocks, collected.products, scenario_sheet[0], CONFIG)
    assert [d.day_number for d in days] == [1, 2, 3]
    assert days[1].products[0].brought_forward == 12
