import pytest

from tendersecure.core.errors import CallRejected, TenderError
from tendersecure.core.events import ProposalSubmitted, Won
from tendersecure.core.host import Host
from tendersecure.core.state import BiddingPhase
from tendersecure.core.storage.storage_manager import StorageManager
from tendersecure.crypto import generate_keypair


@pytest.fixture
def temp_node_dir(tmp_path):
    """Create a temporary directory for host data."""
    data_dir = tmp_path / "tender_data"
    data_dir.mkdir()
    return data_dir


def test_tender_persistence(temp_node_dir):
    """Test that contract state is preserved across restarts."""
    owner = generate_keypair().address
    alice = generate_keypair().address
    bob = generate_keypair().address

    # 1. Start host A
    storage_a = StorageManager(data_dir=temp_node_dir)
    host_a = Host(storage=storage_a)
    host_a.fund(owner, 100)
    host_a.fund(alice, 10)
    host_a.deploy(owner, endowment=40)

    host_a.call(owner, "start_bidding")
    host_a.call(alice, "enter", "doc://alice/1", value=3)
    host_a.call(bob, "enter", "doc://bob/1")
    host_a.call(alice, "enter", "doc://alice/2")

    address_a = host_a.contract_address

    # 2. Stop host A
    storage_a.close()

    # 3. Start host B on the same directory
    storage_b = StorageManager(data_dir=temp_node_dir)
    host_b = Host(storage=storage_b)

    assert host_b.contract_address == address_a
    assert host_b.query("owner") == owner
    assert host_b.contract.state.phase == BiddingPhase.OPEN
    assert host_b.query("get_bidders") == [alice, bob, alice]
    assert host_b.query("get_proposal_for_bidder", alice) == "doc://alice/2"
    assert host_b.query("get_tender_amount") == 43
    assert host_b.balance_of(alice) == 7
    assert len(host_b.event_log) == 3

    # 4. Continue the round on host B
    outcome = host_b.call(owner, "pick_bidder", bob)
    assert outcome.ok
    storage_b.close()

    # 5. Settlement is visible after another restart
    storage_c = StorageManager(data_dir=temp_node_dir)
    host_c = Host(storage=storage_c)

    assert host_c.query("get_bidders") == []
    assert host_c.balance_of(bob) == 43
    assert host_c.event_log[-1] == Won(winner=bob, amount=43)
    assert host_c.event_log[0] == ProposalSubmitted(bidder=alice, value="doc://alice/1")
    storage_c.close()


def test_failed_call_not_persisted(temp_node_dir):
    """A reverted call leaves nothing behind on disk."""
    owner = generate_keypair().address
    alice = generate_keypair().address

    storage_a = StorageManager(data_dir=temp_node_dir)
    host_a = Host(storage=storage_a)
    host_a.fund(alice, 10)
    host_a.deploy(owner)

    outcome = host_a.call(alice, "enter", "doc://early", value=4)
    assert outcome.error == TenderError.BIDDING_NOT_STARTED
    storage_a.close()

    storage_b = StorageManager(data_dir=temp_node_dir)
    host_b = Host(storage=storage_b)

    assert host_b.balance_of(alice) == 10
    assert host_b.query("get_bidders") == []
    assert host_b.event_log == []
    storage_b.close()


def test_memory_and_disk_agree_after_rejected_call(temp_node_dir):
    """An undecodable proposal leaves memory and disk identical."""
    owner = generate_keypair().address
    alice = generate_keypair().address

    storage_a = StorageManager(data_dir=temp_node_dir)
    host_a = Host(storage=storage_a)
    host_a.deploy(owner)
    host_a.call(owner, "start_bidding")

    with pytest.raises(CallRejected):
        host_a.call(alice, "enter", "doc://\udcff")
    assert host_a.query("get_bidders") == []
    storage_a.close()

    storage_b = StorageManager(data_dir=temp_node_dir)
    host_b = Host(storage=storage_b)
    assert host_b.query("get_bidders") == host_a.query("get_bidders")
    assert host_b.event_log == host_a.event_log
    storage_b.close()


def test_empty_directory_loads_undeployed(temp_node_dir):
    storage = StorageManager(data_dir=temp_node_dir)
    host = Host(storage=storage)

    assert host.contract is None
    assert host.event_log == []
    storage.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
