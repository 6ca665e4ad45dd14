import pytest
from pyVmomi import vim

from conftest import FakeGuest, FakeInventory, FakePower, FakeVM
from powerops.exceptions import InvalidWaitSpec, NotFoundError
from powerops.inventory import ByHandle, ByName, FromSequence
from powerops.models import AuxCondition, PowerState, ProbeResult, VMIdentity
from powerops.power import PowerManager, request_start, request_stop, start_and_wait, stop_and_wait

ON = PowerState.POWERED_ON
OFF = PowerState.POWERED_OFF


def test_power_manager_reads_state_every_time():
    vm = FakeVM("vm-1", power_state="poweredOn")
    identity = VMIdentity(vm)
    manager = PowerManager()
    assert manager.get_power_state(identity) == ON
    vm.runtime.powerState = "poweredOff"
    assert manager.get_power_state(identity) == OFF


def test_power_manager_commands():
    vm = FakeVM("vm-1")
    manager = PowerManager()
    manager.issue_shutdown(VMIdentity(vm))
    assert manager.issue_start(VMIdentity(vm)) == "task-1"
    assert vm.calls == ["shutdown", "poweron"]


def test_request_stop_always_issues_shutdown(events):
    power = FakePower([OFF])
    vm = VMIdentity(FakeVM("vm-1"))
    request_stop(vm, power, events.append)
    assert power.shutdowns == [vm]
    assert power.polls == 0
    assert [e.kind for e in events] == ["command_sent"]


def test_request_stop_tolerates_already_off():
    fake = FakeVM("vm-1")
    fake.shutdown_error = vim.fault.InvalidPowerState()
    request_stop(VMIdentity(fake), PowerManager(), lambda event: None)
    assert fake.calls == ["shutdown"]


def test_request_start_skips_running_vm(events):
    power = FakePower([ON])
    vm = VMIdentity(FakeVM("vm-1"))
    assert request_start(vm, power, events.append) is False
    assert power.starts == []
    assert [e.kind for e in events] == ["already_in_target_state"]


def test_request_start_powers_on(events):
    power = FakePower([OFF])
    vm = VMIdentity(FakeVM("vm-1"))
    assert request_start(vm, power, events.append) is True
    assert power.starts == [vm]


def test_start_and_wait_waits_for_ip(sleep, sleeps):
    web01 = FakeVM("vm-10", name="web01")
    # first state is read by the dispatcher before powering on
    power = FakePower([OFF, OFF, OFF, ON])
    guest = FakeGuest(ips=[ProbeResult.not_yet(), ProbeResult.success("10.0.0.5")])
    outcome = start_and_wait(
        ByName("web01"), interval=5, wait_for_ip=True, return_result=True,
        inventory=FakeInventory([web01]), power=power, guest=guest, sleep=sleep,
    )
    assert outcome.final_state == ON
    assert outcome.satisfied == frozenset([AuxCondition.GUEST_IP_ASSIGNED])
    assert outcome.elapsed == 15
    assert outcome.vm.moid == "vm-10"
    assert len(power.starts) == 1
    assert sleeps == [5, 5, 5]


def test_start_and_wait_on_running_vm_does_nothing(sleep, sleeps):
    power = FakePower([ON])
    guest = FakeGuest()
    result = start_and_wait(
        ByName("web01"), wait_for_ip=True, return_result=True,
        inventory=FakeInventory([FakeVM("vm-10", name="web01")]), power=power, guest=guest, sleep=sleep,
    )
    assert result is None
    assert power.starts == []
    assert power.polls == 1
    assert guest.ip_probes == 0
    assert sleeps == []


def test_stop_and_wait_already_off(sleep, sleeps):
    db01 = FakeVM("vm-20", name="db01", power_state="poweredOn")
    power = FakePower([OFF])
    outcome = stop_and_wait(
        ByName("db01"), return_result=True, inventory=FakeInventory([db01]), power=power, sleep=sleep,
    )
    assert outcome.final_state == OFF
    assert outcome.elapsed == 0
    assert sleeps == []
    assert len(power.shutdowns) == 1


def test_stop_and_wait_returns_nothing_by_default(sleep):
    power = FakePower([ON, OFF])
    result = stop_and_wait(ByHandle("vm-20"), inventory=FakeInventory([FakeVM("vm-20")]), power=power, sleep=sleep)
    assert result is None


def test_stop_and_wait_uses_first_match():
    first = FakeVM("vm-31", name="api")
    second = FakeVM("vm-32", name="api")
    inventory = FakeInventory([first, second])
    power = FakePower([OFF])
    outcome = stop_and_wait(ByName("api", "vc1"), return_result=True, inventory=inventory, power=power,
                            sleep=lambda s: None)
    assert inventory.lookups == [("api", "vc1")]
    assert [vm.moid for vm in power.shutdowns] == ["vm-31"]
    assert outcome.vm.moid == "vm-31"


def test_unknown_vm_fails_before_any_command():
    power = FakePower([ON])
    with pytest.raises(NotFoundError):
        stop_and_wait(ByName("ghost"), inventory=FakeInventory([]), power=power, sleep=lambda s: None)
    assert power.shutdowns == []


def test_invalid_interval_fails_before_any_command():
    power = FakePower([OFF])
    for interval in (0, 3601):
        with pytest.raises(InvalidWaitSpec):
            start_and_wait(ByHandle("vm-1"), interval=interval, inventory=FakeInventory([FakeVM("vm-1")]),
                           power=power, sleep=lambda s: None)
    assert power.starts == []
    assert power.polls == 0


def test_piped_handles_are_processed_one_per_call(sleep):
    vms = [FakeVM("vm-1"), FakeVM("vm-2")]
    source = FromSequence(["vm-1", "vm-2"])
    power = FakePower([OFF])
    inventory = FakeInventory(vms)
    first = stop_and_wait(source, return_result=True, inventory=inventory, power=power, sleep=sleep)
    second = stop_and_wait(source, return_result=True, inventory=inventory, power=power, sleep=sleep)
    assert (first.vm.moid, second.vm.moid) == ("vm-1", "vm-2")
    with pytest.raises(NotFoundError):
        stop_and_wait(source, inventory=inventory, power=power, sleep=sleep)
