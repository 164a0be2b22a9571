"""End-to-end tests for the portfolio-rebalancer command line."""

import json
import logging

import pytest

from rebalancer_cli.main import main

PORTFOLIO = """\
portfolio:
  holdings:
    - stock_name: Apple Inc.
      ticker: AAPL
      quantity: 10
      purchase_price: 140
      current_price: 150
    - stock_name: Microsoft Corp.
      ticker: MSFT
      quantity: 5
      purchase_price: 280
      current_price: 300
target:
  name: Growth
  stocks:
    - stock_name: Apple Inc.
      ticker: AAPL
      target_weight: {apple}
    - stock_name: Microsoft Corp.
      ticker: MSFT
      target_weight: 30
{options}"""


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    """main() reconfigures the root logger; put it back afterwards."""
    monkeypatch.delenv("REBALANCER_CONFIG", raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def portfolio_file(tmp_path):
    def write(apple=70, options=""):
        path = tmp_path / "portfolio.yaml"
        path.write_text(PORTFOLIO.format(apple=apple, options=options))
        return str(path)
    return write


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestRebalance:

    def test_text_output(self, capsys, portfolio_file):
        code, out, _ = run(capsys, "rebalance", portfolio_file())

        assert code == 0
        lines = out.splitlines()
        assert lines[0] == "Rebalancing: Growth"
        assert "Portfolio value: $3,000.00" in lines
        assert "Threshold: 5.00%" in lines
        assert "Consider buying:" in lines
        assert "  • Apple Inc.: 4 shares ($600.00)" in lines
        assert "  • Microsoft Corp.: 2 shares ($600.00)" in lines

    def test_json_output(self, capsys, portfolio_file):
        code, out, _ = run(capsys, "rebalance", portfolio_file(), "--json")

        data = json.loads(out)
        assert code == 0
        assert data["result"]["total_current_value"] == 3000
        assert data["result"]["is_balanced"] is False
        assert data["validation"]["is_valid"] is True
        assert data["trading_summary"]["total_trades"] == 2
        assert data["recommendations"][0] == "Consider buying:"

    def test_threshold_flag(self, capsys, portfolio_file):
        _, out, _ = run(capsys, "rebalance", portfolio_file(), "--threshold", "50")

        assert "Your portfolio is well-balanced and aligned with your target allocation." in out

    def test_file_options_then_flags(self, capsys, portfolio_file):
        path = portfolio_file(options="options:\n  minimum_trading_unit: 10\n")

        _, out, _ = run(capsys, "rebalance", path)
        assert "Consider buying:" not in out

        _, out, _ = run(capsys, "rebalance", path, "--unit", "1")
        assert "  • Apple Inc.: 4 shares ($600.00)" in out

    def test_commission_flag_enables_filter(self, capsys, portfolio_file):
        _, out, _ = run(capsys, "rebalance", portfolio_file(), "--commission", "20")

        assert "Apple Inc.: 4 shares" not in out
        assert "Total rebalancing value: $600.00" in out

    def test_partial_flag(self, capsys, portfolio_file):
        _, out, _ = run(capsys, "rebalance", portfolio_file(), "--partial", "--json")

        data = json.loads(out)
        apple = next(c for c in data["result"]["calculations"] if c["ticker"] == "AAPL")
        assert apple["adjusted_quantity_change"] == apple["quantity_change"]

    def test_validation_issues_are_shown(self, capsys, portfolio_file):
        code, out, _ = run(capsys, "rebalance", portfolio_file(apple=60))

        assert code == 0
        assert "Validation issues:" in out
        assert "  - Target weights total 90.00% instead of 100%" in out

    def test_strict_fails_on_issues(self, capsys, portfolio_file):
        code, _, _ = run(capsys, "rebalance", portfolio_file(apple=60), "--strict")
        assert code == 2

    def test_strict_passes_clean_result(self, capsys, portfolio_file):
        code, _, _ = run(capsys, "rebalance", portfolio_file(), "--strict")
        assert code == 0

    def test_missing_file(self, capsys, tmp_path):
        code, out, err = run(capsys, "rebalance", str(tmp_path / "missing.yaml"))

        assert code == 1
        assert out == ""
        assert "error: Portfolio file not found" in err

    def test_invalid_holding(self, capsys, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(
            "portfolio:\n  holdings:\n"
            "    - {stock_name: Apple Inc., quantity: -1, purchase_price: 1, current_price: 1}\n"
        )

        code, _, err = run(capsys, "rebalance", str(path))

        assert code == 1
        assert "Holding 1 (Apple Inc.): quantity" in err

    def test_invalid_file_options(self, capsys, portfolio_file):
        code, _, _ = run(capsys, "rebalance", portfolio_file(options="options:\n  minimum_trading_unit: 0\n"))
        assert code == 1


class TestAnalyze:

    def test_text_output(self, capsys, portfolio_file):
        code, out, _ = run(capsys, "analyze", portfolio_file())

        assert code == 0
        assert "Portfolio value: $3,000.00 across 2 stocks" in out
        assert "Health score: 85/100 (diversification 100, performance 100, risk 50)" in out
        assert "Imbalances:" in out
        assert "  [high] AAPL: Underweight by 20.0% - Consider buying more AAPL" in out

    def test_json_output(self, capsys, portfolio_file):
        _, out, _ = run(capsys, "analyze", portfolio_file(), "--json")

        data = json.loads(out)
        assert data["health_score"]["overall"] == 85
        assert data["analytics"]["stock_count"] == 2
        assert [i["stock_key"] for i in data["imbalances"]] == ["AAPL", "MSFT"]


class TestValidateTarget:

    def test_valid(self, capsys, portfolio_file):
        code, out, _ = run(capsys, "validate-target", portfolio_file())

        assert code == 0
        assert out.splitlines() == ["Total weight: 100.00%", "Target allocation is valid"]

    def test_invalid(self, capsys, portfolio_file):
        code, out, _ = run(capsys, "validate-target", portfolio_file(apple=60))

        assert code == 2
        assert out.splitlines() == [
            "Total weight: 90.00%",
            "Target allocation has errors:",
            "  - Total allocation must equal 100%, current total: 90.00%",
        ]


class TestConfiguration:

    def test_config_file_defaults(self, capsys, portfolio_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("rebalancing:\n  rebalance_threshold: 50\n")

        _, out, _ = run(capsys, "--config", str(config), "rebalance", portfolio_file())

        assert "Threshold: 50.00%" in out
        assert "well-balanced" in out

    def test_config_from_environment(self, capsys, portfolio_file, tmp_path, monkeypatch):
        config = tmp_path / "config.yaml"
        config.write_text("rebalancing:\n  rebalance_threshold: 50\n")
        monkeypatch.setenv("REBALANCER_CONFIG", str(config))

        _, out, _ = run(capsys, "rebalance", portfolio_file())

        assert "Threshold: 50.00%" in out

    def test_invalid_config(self, capsys, portfolio_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("rebalancing:\n  minimum_trading_unit: 0\n")

        code, out, err = run(capsys, "--config", str(config), "rebalance", portfolio_file())

        assert code == 1
        assert out == ""
        assert "error: Invalid configuration" in err

    def test_config_error_reported_once(self, capsys, portfolio_file, tmp_path):
        # Without handlers a logged error would also reach stderr via the last-resort handler
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
        config = tmp_path / "config.yaml"
        config.write_text("rebalancing:\n  minimum_trading_unit: 0\n")

        code, _, err = run(capsys, "--config", str(config), "rebalance", portfolio_file())

        assert code == 1
        assert err.count("Invalid configuration") == 1

    def test_unknown_file_option(self, capsys, portfolio_file):
        path = portfolio_file(options="options:\n  rebalanceThreshold: 0.5\n")

        code, out, err = run(capsys, "rebalance", path)

        assert code == 1
        assert out == ""
        assert "error: Unknown options: rebalanceThreshold" in err

    def test_logs_go_to_stderr(self, capsys, portfolio_file):
        _, out, err = run(capsys, "--log-level", "DEBUG", "rebalance", portfolio_file())

        assert "Calculating rebalance for" in err
        assert "Calculating rebalance for" not in out
