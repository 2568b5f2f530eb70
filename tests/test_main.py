import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from main import main


class TestMain:
    def test_prints_balances(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 2, 3, 2.0",
            "deposit, 1, 1, 32.0",
            "withdrawal, 1, 2, 20.0",
            "withdrawal, 2, 4, 200.0",
            "bogus, 1, 5, 1.0",
        ]))

        assert main([str(csv_file)]) == 0

        captured = capsys.readouterr()
        assert captured.out == (
            "client,available,held,total,locked\n"
            "1,12,0,12,false\n"
            "2,2,0,2,false\n"
        )

    def test_unreadable_rows_do_not_abort_run(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_bytes(b"\n".join([
            b"type,client,tx,amount",
            b"deposit,1,1,1.0",
            b"deposit,1,2,\xff\xfe",
            b"deposit,1,3," + b"9" * 200000,
            b"deposit,1,4,2.0",
        ]))

        assert main([str(csv_file)]) == 0
        assert capsys.readouterr().out == (
            "client,available,held,total,locked\n"
            "1,3,0,3,false\n"
        )

    def test_missing_input_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.csv")]) == 1
        assert capsys.readouterr().out == ""

    def test_requires_input_argument(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2

    def test_debug_and_quiet_are_exclusive(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["--debug", "--quiet", str(tmp_path / "x.csv")])
