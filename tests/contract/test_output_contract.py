from __future__ import annotations

import json
from pathlib import Path

from stock_sheet.models.config_models import ReconcileConfig
from stock_sheet.services.orchestrator import run_pipeline, write_days_json

"""Renderer payload contract: key sets and ordering of the days JSON."""

DAY_KEYS = {"dayNumber", "dateLabel", "hasActivity", "products"}
PRODUCT_KEYS = {"date", "code", "name", "category", "broughtForward", "received", "sold", "waste", "remain"}


def test_days_payload_keys_and_order(tmp_path: Path, make_sheet):
    sheet = make_sheet(
        3,
        [
            ("BEV", "B1", "Water", [["4", "1"], ["", "", "", "2"], ["", "1"]]),
            ("SNK", "S1", "Chips", [["", "3"]]),
        ],
    )
    output = run_pipeline(sheet, ReconcileConfig(source="memory"))
    payload = json.loads(write_days_json(output.days, tmp_path / "days.json").read_text(encoding="utf-8"))
    assert [d["dayNumber"] for d in payload] == [1, 2, 3]
    for day in payload:
        assert set(day.keys()) == DAY_KEYS
        assert isinstance(day["hasActivity"], bool)
        for product in day["products"]:
            assert set(product.keys()) == PRODUCT_KEYS
            assert product["date"] == day["dateLabel"]
            assert product["remain"] == (
                product["broughtForward"] + product["received"] - product["sold"] - product["waste"]
            )
