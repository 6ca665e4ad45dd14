import time

from pyVmomi import vim

from powerops import config as conf
from powerops.tools.logger import logger
from powerops.models import AuxCondition, PowerState, WaitEvent, WaitSpec
from powerops.inventory import resolve_identity
from powerops.waiter import WaitEngine, log_event


class PowerManager(object):
    """Power management calls against vSphere. Every call is a round-trip, nothing is cached."""

    def get_power_state(self, vm):
        return PowerState.from_vim(vm.vm.runtime.powerState)

    def issue_shutdown(self, vm):
        """Asks VMware tools to shut the guest down. Returns immediately, vSphere does not track completion."""
        vm.vm.ShutdownGuest()

    def issue_start(self, vm):
        return vm.vm.PowerOnVM_Task()


def request_stop(vm, power, on_event=log_event):
    """Issues guest shutdown regardless of the current power state."""
    try:
        power.issue_shutdown(vm)
    except vim.fault.InvalidPowerState:
        # Already powered off, nothing to shut down
        logger.info('{} is not powered on, shutdown request ignored by vCenter'.format(vm))
    on_event(_event('command_sent', vm, 'guest shutdown'))


def request_start(vm, power, on_event=log_event):
    """Issues power on unless the VM is already running. Returns False when nothing was done."""
    if power.get_power_state(vm) == PowerState.POWERED_ON:
        on_event(_event('already_in_target_state', vm, 'VM is already powered on, nothing to do'))
        return False

    task = power.issue_start(vm)
    on_event(_event('command_sent', vm, 'power on {}'.format(task)))
    return True


def _event(kind, vm, detail):
    return WaitEvent(kind, vm, 0, detail)


def _interval(interval):
    return conf.POLL_INTERVAL if interval is None else interval


def _conditions(wait_for_ip, wait_for_customization):
    conditions = []
    if wait_for_ip:
        conditions.append(AuxCondition.GUEST_IP_ASSIGNED)
    if wait_for_customization:
        conditions.append(AuxCondition.GUEST_CUSTOMIZATION_COMPLETE)
    return conditions


def stop_and_wait(source, interval=None, return_result=False, max_wait=None, max_polls=None, on_event=None,
                  inventory=None, power=None, sleep=time.sleep):
    """Shuts the guest down and blocks until the VM is powered off.
    Returns WaitOutcome when return_result is set, None otherwise."""
    spec = WaitSpec.create(PowerState.POWERED_OFF, _interval(interval),
                           max_wait=max_wait, max_polls=max_polls)
    on_event = on_event or log_event
    power = power or PowerManager()

    vm = resolve_identity(source, inventory)
    request_stop(vm, power, on_event)
    outcome = WaitEngine(power, sleep=sleep, on_event=on_event).wait(vm, spec)
    if return_result:
        return outcome


def start_and_wait(source, interval=None, wait_for_ip=False, wait_for_customization=False, return_result=False,
                   max_wait=None, max_polls=None, probe_failure='retry', on_event=None, inventory=None, power=None,
                   guest=None, sleep=time.sleep):
    """Powers the VM on and blocks until it runs and every requested guest condition holds.
    Already running VM is left alone and None is returned without waiting."""
    spec = WaitSpec.create(PowerState.POWERED_ON, _interval(interval),
                           conditions=_conditions(wait_for_ip, wait_for_customization),
                           max_wait=max_wait, max_polls=max_polls, probe_failure=probe_failure)
    on_event = on_event or log_event
    power = power or PowerManager()

    vm = resolve_identity(source, inventory)
    if not request_start(vm, power, on_event):
        return None
    outcome = WaitEngine(power, guest, sleep=sleep, on_event=on_event).wait(vm, spec)
    if return_result:
        return outcome
