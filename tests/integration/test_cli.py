"""
Integration tests for the tender CLI.

Each invocation opens the SQLite database under --data-dir, so a sequence
of commands acts on the same tender.
"""

import pytest
from click.testing import CliRunner

from tendersecure.cli.main import cli

OWNER = "0x" + "01" * 20
ALICE = "0x" + "0a" * 20
BOB = "0x" + "0b" * 20


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    data_dir = str(tmp_path / "data")

    def invoke(*args):
        return runner.invoke(cli, ["--data-dir", data_dir, *args])

    return invoke


@pytest.fixture
def deployed(run):
    result = run("deploy", "--owner", OWNER, "--endowment", "100")
    assert result.exit_code == 0, result.output
    return run


class TestAccounts:

    def test_keygen(self, run):
        result = run("keygen")
        assert result.exit_code == 0
        assert "Address:     0x" in result.output

    def test_fund(self, run):
        result = run("fund", ALICE, "25")
        assert result.exit_code == 0
        assert "balance: 25 TND" in result.output

    def test_bad_address(self, run):
        result = run("fund", "0x1234", "1")
        assert result.exit_code == 2


class TestLifecycle:

    def test_status_before_deploy(self, run):
        result = run("status")
        assert result.exit_code == 0
        assert "No tender deployed." in result.output

    def test_deploy(self, deployed):
        result = deployed("status")
        assert f"Owner:    {OWNER}" in result.output
        assert "Bidding:  closed" in result.output
        assert "Escrow:   100 TND" in result.output

    def test_deploy_twice(self, deployed):
        result = deployed("deploy", "--owner", ALICE)
        assert result.exit_code == 1
        assert "already deployed" in result.output

    def test_full_round(self, deployed):
        run = deployed
        assert run("fund", ALICE, "10").exit_code == 0

        assert run("start", "--caller", OWNER).exit_code == 0

        result = run("enter", "--caller", ALICE, "--proposal", "doc://a", "--value", "4")
        assert result.exit_code == 0
        assert "1 entries" in result.output

        result = run("enter", "--caller", BOB, "--proposal", "doc://b")
        assert "2 entries" in result.output

        result = run("status")
        assert "Bidding:  open" in result.output
        assert "Escrow:   104 TND" in result.output
        assert f"{BOB}: doc://b" in result.output

        result = run("pick", "--caller", OWNER, "--winner", BOB)
        assert result.exit_code == 0
        assert f"{BOB} won 104 TND" in result.output

        result = run("events")
        assert result.output.count("ProposalSubmitted") == 2
        assert "#2 Won" in result.output

    def test_submit_amount(self, deployed):
        """deploy spends the owner's funds on the endowment; top up first."""
        assert deployed("fund", OWNER, "50").exit_code == 0
        result = deployed("submit-amount", "--caller", OWNER, "--value", "50")
        assert result.exit_code == 0
        assert "Escrow: 150 TND" in result.output


class TestErrors:

    def test_enter_before_start(self, deployed):
        result = deployed("enter", "--caller", ALICE, "--proposal", "doc://a")
        assert result.exit_code == 1
        assert "BiddingNotStarted" in result.output

    def test_start_by_stranger(self, deployed):
        result = deployed("start", "--caller", ALICE)
        assert result.exit_code == 1
        assert "CallerNotOwner" in result.output

    def test_pick_without_entries(self, deployed):
        result = deployed("pick", "--caller", OWNER, "--winner", ALICE)
        assert result.exit_code == 1
        assert "NoEntries" in result.output

    def test_value_on_stop(self, deployed):
        """stop has no --value option at all."""
        result = deployed("stop", "--caller", OWNER, "--value", "1")
        assert result.exit_code == 2

    def test_value_without_funds(self, deployed):
        deployed("start", "--caller", OWNER)
        result = deployed("enter", "--caller", ALICE, "--proposal", "x", "--value", "5")
        assert result.exit_code == 1
        assert "Insufficient balance" in result.output

    def test_submit_amount_without_funds(self, deployed):
        result = deployed("submit-amount", "--caller", OWNER, "--value", "50")
        assert result.exit_code == 1
        assert "Insufficient balance" in result.output

    def test_events_empty(self, deployed):
        result = deployed("events")
        assert "No events." in result.output


class TestDemo:

    def test_demo_runs(self, run):
        result = run("demo")
        assert result.exit_code == 0, result.output
        assert "BiddingNotStarted" in result.output
        assert "received 1005 TND" in result.output
        assert "Entries after settlement: 0" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
