import io
import logging
import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from main import build_parser, format_decimal, main, write_report
from models import ClientAccount


class TestFormatDecimal:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("100.5", "100.5"),
            ("100.0", "100"),
            ("0", "0"),
            ("1.23456", "1.2346"),
            ("0.0001", "0.0001"),
            ("-50", "-50"),
            ("-0.00001", "0"),
            ("1000000", "1000000"),
        ],
    )
    def test_format(self, value, expected):
        assert format_decimal(Decimal(value)) == expected


class TestWriteReport:
    def test_rows_sorted_by_client(self):
        accounts = {
            2: ClientAccount(client_id=2, available=Decimal("2")),
            1: ClientAccount(client_id=1, available=Decimal("-50"), held=Decimal("100.25"), locked=True),
        }
        out = io.StringIO()
        write_report(accounts, out)

        assert out.getvalue().splitlines() == [
            "client,available,held,total,locked",
            "1,-50,100.25,50.25,true",
            "2,2,0,2,false",
        ]


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["input.csv"])
        assert args.filepath == "input.csv"
        assert args.verbose is False
        assert args.partial_report is False

    def test_flags(self):
        args = build_parser().parse_args(["-v", "--partial-report", "input.csv"])
        assert args.verbose is True
        assert args.partial_report is True

    def test_filepath_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    def test_success(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "deposit, 2, 2, 2.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "withdrawal, 2, 5, 3.0",
        ]))

        assert main([str(csv_file)]) == 0

        assert capsys.readouterr().out.splitlines() == [
            "client,available,held,total,locked",
            "1,1.5,0,1.5,false",
            "2,2,0,2,false",
        ]

    def test_rejections_do_not_change_exit_status(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type,client,tx,amount\nwithdrawal,1,1,10\n")

        assert main(["--verbose", str(csv_file)]) == 0
        assert capsys.readouterr().out.splitlines() == ["client,available,held,total,locked"]

    def test_missing_file(self, tmp_path, capsys, caplog):
        with caplog.at_level(logging.ERROR):
            assert main([str(tmp_path / "missing.csv")]) == 1

        assert capsys.readouterr().out == ""
        assert "Couldn't open file" in caplog.text

    def test_fatal_error_skips_report_by_default(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1,10\ndeposit,oops,2,1\n")

        assert main([str(csv_file)]) == 1
        assert capsys.readouterr().out == ""

    def test_fatal_error_with_partial_report(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1,10\ndeposit,oops,2,1\n")

        assert main(["--partial-report", str(csv_file)]) == 1
        assert capsys.readouterr().out.splitlines() == [
            "client,available,held,total,locked",
            "1,10,0,10,false",
        ]

    def test_oversized_amount_is_a_clean_failure(self, tmp_path, capsys, caplog):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,2,1,5\ndeposit,1,2,1e1000000\n")

        with caplog.at_level(logging.ERROR):
            assert main(["-v", "--partial-report", str(csv_file)]) == 1

        assert "Couldn't deserialize row" in caplog.text
        assert capsys.readouterr().out.splitlines() == [
            "client,available,held,total,locked",
            "2,5,0,5,false",
        ]
