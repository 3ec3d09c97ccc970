from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from stock_sheet.cli import main as cli_main
from stock_sheet.logging.init import reset_logging
from stock_sheet.services.orchestrator import ProcessingError

"""Exit code contract: 0 = reconciled, 1 = fatal (config / fetch)."""


def test_exit_code_fatal_startup(temp_workdir: Path, capsys):
    reset_logging()
    code = cli_main([])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_success(temp_workdir: Path, write_config, scenario_sheet, write_csv, capsys):
    reset_logging()
    write_csv(temp_workdir / "data" / "stock.csv", scenario_sheet)
    code = cli_main([])
    assert code == 0
    assert "SUMMARY days=3/3" in capsys.readouterr().out


def test_exit_code_fetch_failure(temp_workdir: Path, write_config, capsys):
    reset_logging()
    with patch(
        'stock_sheet.cli.app.process_source',
        side_effect=ProcessingError("HTTP Error 404: Not Found"),
    ):
        code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR processing: HTTP Error 404: Not Found" in out
    assert "SUMMARY" not in out
