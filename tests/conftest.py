from types import SimpleNamespace

import pytest

from powerops.models import ProbeResult, VMIdentity


class FakeVM:
    def __init__(self, moid, name=None, power_state="poweredOff", ip=None, tools="guestToolsRunning"):
        self._moid = moid
        self.name = name or moid
        self.runtime = SimpleNamespace(powerState=power_state)
        self.guest = SimpleNamespace(ipAddress=ip, toolsRunningStatus=tools)
        self.calls = []
        self.shutdown_error = None

    def _GetMoId(self):
        return self._moid

    def ShutdownGuest(self):
        self.calls.append("shutdown")
        if self.shutdown_error:
            raise self.shutdown_error

    def PowerOnVM_Task(self):
        self.calls.append("poweron")
        return "task-1"


class FakePower:
    """Replays power states, the last one repeats forever."""

    def __init__(self, states):
        self.states = list(states)
        self.polls = 0
        self.shutdowns = []
        self.starts = []

    def get_power_state(self, vm):
        self.polls += 1
        if len(self.states) > 1:
            return self.states.pop(0)
        return self.states[0]

    def issue_shutdown(self, vm):
        self.shutdowns.append(vm)

    def issue_start(self, vm):
        self.starts.append(vm)
        return "task-1"


class FakeGuest:
    """Replays probe results per condition, the last one repeats forever."""

    def __init__(self, ips=None, markers=None):
        self.ips = list(ips or [ProbeResult.not_yet()])
        self.markers = list(markers or [ProbeResult.not_yet()])
        self.ip_probes = 0
        self.marker_probes = 0

    @staticmethod
    def _next(results):
        if len(results) > 1:
            return results.pop(0)
        return results[0]

    def get_guest_ip(self, vm):
        self.ip_probes += 1
        return self._next(self.ips)

    def probe_customization_marker(self, vm):
        self.marker_probes += 1
        return self._next(self.markers)


class FakeInventory:
    def __init__(self, vms):
        self.vms = vms
        self.lookups = []

    def resolve_by_name(self, name, server=None):
        self.lookups.append((name, server))
        return [VMIdentity(vm, name=name) for vm in self.vms if vm.name == name]

    def resolve_by_handle(self, handle, server=None):
        if isinstance(handle, VMIdentity):
            return handle
        for vm in self.vms:
            if vm._GetMoId() == handle:
                return VMIdentity(vm)
        return VMIdentity(handle)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def sleep(sleeps):
    return sleeps.append


@pytest.fixture
def events():
    return []


@pytest.fixture
def vm():
    return VMIdentity(FakeVM("vm-10", name="web01"), name="web01")
