import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amount import Amount
from engine import PaymentsEngine


def by_client(snapshots):
    return {snapshot.client: snapshot for snapshot in snapshots}


def run(tmp_path, rows):
    csv_file = tmp_path / "large_test.csv"
    csv_file.write_text('\n'.join(["type, client, tx, amount", *rows]))
    engine = PaymentsEngine()
    return engine, by_client(engine.process_file(str(csv_file)))


class TestPaymentsEngineLargeScale:
    def test_1000_accounts_with_rejected_records(self, tmp_path):
        """Every client replays the same mix of accepted, duplicate and overdrawn records."""
        num_clients = 1000
        rows = []
        for client_id in range(1, num_clients + 1):
            base = client_id * 10
            rows += [
                f"deposit, {client_id}, {base + 1}, 100.00009",
                f"deposit, {client_id}, {base + 2}, 200",
                f"withdrawal, {client_id}, {base + 3}, 50",
                f"deposit, {client_id}, {base + 1}, 999",
                f"withdrawal, {client_id}, {base + 4}, 1000",
                # the overdrawn withdrawal was never recorded, so its id is still free
                f"deposit, {client_id}, {base + 4}, 0.0001",
            ]

        engine, accounts = run(tmp_path, rows)

        assert len(accounts) == num_clients
        assert engine.stats.processed == 4 * num_clients
        assert engine.stats.failures_by_code == {
            "DUPLICATE_TRANSACTION": num_clients,
            "INSUFFICIENT_FUNDS": num_clients,
        }
        assert len(engine.ledger) == 4 * num_clients

        expected = Amount.parse("250.0001")
        for client_id in range(1, num_clients + 1):
            account = accounts[client_id]
            assert account.available == expected, f"Client {client_id}: got {account.available}"
            assert account.held.is_zero
            assert account.locked is False

    def test_dispute_lifecycles_across_client_groups(self, tmp_path):
        rows = []

        # 1-10: dispute, resolve, dispute again, resolve again
        for client_id in range(1, 11):
            tx = client_id * 100
            rows += [
                f"deposit, {client_id}, {tx + 1}, 100",
                f"deposit, {client_id}, {tx + 2}, 50",
                f"dispute, {client_id}, {tx + 1},",
                f"resolve, {client_id}, {tx + 1},",
                f"dispute, {client_id}, {tx + 1},",
                f"resolve, {client_id}, {tx + 1},",
            ]

        # 11-20: chargeback, then nothing more can touch the deposit or the account
        for client_id in range(11, 21):
            tx = client_id * 100
            rows += [
                f"deposit, {client_id}, {tx + 1}, 100",
                f"dispute, {client_id}, {tx + 1},",
                f"chargeback, {client_id}, {tx + 1},",
                f"dispute, {client_id}, {tx + 1},",
                f"resolve, {client_id}, {tx + 1},",
                f"deposit, {client_id}, {tx + 2}, 50",
            ]

        # 21-30: deposit mostly withdrawn, so there is not enough left to hold
        for client_id in range(21, 31):
            tx = client_id * 100
            rows += [
                f"deposit, {client_id}, {tx + 1}, 100",
                f"withdrawal, {client_id}, {tx + 2}, 80",
                f"dispute, {client_id}, {tx + 1},",
            ]

        # 31-40: only deposits can be disputed
        for client_id in range(31, 41):
            tx = client_id * 100
            rows += [
                f"deposit, {client_id}, {tx + 1}, 100",
                f"withdrawal, {client_id}, {tx + 2}, 30",
                f"dispute, {client_id}, {tx + 2},",
            ]

        # 41-50: repeated dispute, another client's tx and an unknown tx
        for client_id in range(41, 51):
            tx = client_id * 100
            rows += [
                f"deposit, {client_id}, {tx + 1}, 100",
                f"deposit, {client_id}, {tx + 2}, 40",
                f"dispute, {client_id}, {tx + 2},",
                f"dispute, {client_id}, {tx + 2},",
                f"dispute, {client_id}, {(client_id - 10) * 100 + 1},",
                f"dispute, {client_id}, {tx + 9},",
            ]

        engine, accounts = run(tmp_path, rows)

        assert len(accounts) == 50
        assert engine.stats.processed == 160
        assert engine.stats.failures_by_code == {
            "TRANSACTION_FINALIZED": 10,
            "NOT_DISPUTED": 10,
            "ACCOUNT_LOCKED": 10,
            "INSUFFICIENT_FUNDS": 10,
            "INVALID_DISPUTE": 10,
            "ALREADY_DISPUTED": 10,
            "CLIENT_MISMATCH": 10,
            "UNKNOWN_TRANSACTION": 10,
        }

        for client_id in range(1, 11):
            assert accounts[client_id].available == Amount.parse("150"), f"Client {client_id}"
            assert accounts[client_id].held.is_zero
            assert accounts[client_id].locked is False
            assert not engine.ledger.get(client_id * 100 + 1).disputed

        for client_id in range(11, 21):
            assert accounts[client_id].total.is_zero, f"Client {client_id}"
            assert accounts[client_id].held.is_zero
            assert accounts[client_id].locked is True
            assert engine.ledger.get(client_id * 100 + 1).charged_back
            assert client_id * 100 + 2 not in engine.ledger

        for client_id in range(21, 31):
            assert accounts[client_id].available == Amount.parse("20"), f"Client {client_id}"
            assert accounts[client_id].held.is_zero
            assert not engine.ledger.get(client_id * 100 + 1).disputed

        for client_id in range(31, 41):
            assert accounts[client_id].available == Amount.parse("70"), f"Client {client_id}"
            assert accounts[client_id].held.is_zero
            assert accounts[client_id].locked is False

        for client_id in range(41, 51):
            assert accounts[client_id].available == Amount.parse("100"), f"Client {client_id}"
            assert accounts[client_id].held == Amount.parse("40")
            assert accounts[client_id].total == Amount.parse("140")
            assert accounts[client_id].locked is False
