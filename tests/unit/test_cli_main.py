from __future__ import annotations

from pathlib import Path

from fulfillment_split.cli.__main__ import main as cli_main


def test_cli_no_files_success(write_config, temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY files=0 success=0 failed=0 orders=0" in out


def test_cli_directory_missing(write_config, temp_workdir: Path, capsys):
    text = write_config.read_text(encoding="utf-8").replace("./data", "./missing_dir")
    write_config.write_text(text, encoding="utf-8")
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR Directory not found:" in out


def test_cli_no_input_and_no_source_directory(temp_workdir: Path, capsys):
    code = cli_main([])
    assert code == 1
    assert "ERROR no input files given" in capsys.readouterr().out


def test_cli_reports_multi_location_orders(write_config, report_excel: Path, capsys):
    code = cli_main([str(report_excel)])
    out = capsys.readouterr().out
    assert code == 0
    assert "fulfillment.xlsx: 2 orders with multiple fulfillment locations (5 rows)" in out
    assert "Order OS-0001 (2 locations)" in out
    assert "Link: https://example.my.salesforce.com/lightning/r/OrderSummary/0a3Hs000000AbCdEAA/view" in out
    assert "SUMMARY files=1 success=1 failed=0 orders=3 multi_location_orders=2 related_rows=5" in out


def test_cli_show_rows(temp_workdir: Path, report_excel: Path, capsys):
    code = cli_main([str(report_excel), "--show-rows", "--page", "1"])
    out = capsys.readouterr().out
    assert code == 0
    assert "page 1/1 (rows 1-5 of 5)" in out


def test_cli_explicit_columns(temp_workdir: Path, excel_factory, capsys):
    path = excel_factory(
        temp_workdir, "custom.xlsx",
        {"S": [["ref", "site"], ["A-1", "North"], [None, "South"], ["A-2", "North"]]},
    )
    code = cli_main([str(path), "--order-column", "0", "--location-column", "1"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Order A-1 (2 locations)" in out


def test_cli_columns_must_be_paired(temp_workdir: Path, capsys):
    code = cli_main(["x.xlsx", "--order-column", "0"])
    assert code == 1
    assert "ERROR arguments:" in capsys.readouterr().out


def test_cli_bad_config(temp_workdir: Path, capsys):
    cfg = temp_workdir / "config" / "analyzer.yml"
    cfg.write_text("page_size: 0\n", encoding="utf-8")
    code = cli_main([])
    assert code == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_cli_debug_mode(temp_workdir: Path, report_excel: Path, capsys):
    code = cli_main([str(report_excel), "--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG header found at row 3 (rule=full_signature)" in out


def test_cli_inspect_data(temp_workdir: Path, report_excel: Path, capsys):
    code = cli_main([str(report_excel), "--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: fulfillment.xlsx" in out
    assert "header_row=3 rule=full_signature" in out
    assert "order_column=2 location_column=3" in out
    assert "SUMMARY" not in out
    assert "note: no header signature" not in out


def test_cli_inspect_data_reports_mapping_used(temp_workdir: Path, excel_factory, capsys):
    path = excel_factory(
        temp_workdir, "plain.xlsx",
        {"S": [["Customer", "Ref", "Number", "Site"], ["Acme", "x", "100", "North"]]},
    )
    code = cli_main([str(path), "--inspect-data", "--order-column", "1", "--location-column", "3"])
    out = capsys.readouterr().out
    assert code == 0
    assert "header_row=1 rule=fallback" in out
    assert "note: no header signature found, first row used as header" in out
    assert "order_column=1 location_column=3" in out


def test_cli_env_file_sets_url_template(temp_workdir: Path, report_excel: Path, capsys, monkeypatch):
    # register the variable with monkeypatch so the value loaded from .env is undone
    monkeypatch.setenv("RECORD_URL_TEMPLATE", "placeholder")
    monkeypatch.delenv("RECORD_URL_TEMPLATE")
    (temp_workdir / ".env").write_text(
        "RECORD_URL_TEMPLATE=https://env.example/{record_id}\n", encoding="utf-8"
    )
    code = cli_main([str(report_excel)])
    out = capsys.readouterr().out
    assert code == 0
    assert "Link: https://env.example/0a3Hs000000AbCdEAA" in out
