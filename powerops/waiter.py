"""Wait-condition engine.

The engine polls the power state of one VM at a fixed interval until it matches the
target of a WaitSpec. Afterwards the requested auxiliary conditions are probed on the
same cadence. Each condition latches once it succeeds and is never probed again, the
power state is not re-read once the target was observed.

States of one wait: waiting for the power state, waiting for auxiliary conditions,
satisfied. A wait ends either with a WaitOutcome or with WaitTimeoutError/ProbeError
when the WaitSpec sets limits or escalates probe failures.
"""
import logging
import time

from powerops.tools.logger import logger
from powerops.exceptions import ProbeError, WaitTimeoutError
from powerops.models import AuxCondition, WaitEvent, WaitOutcome
from powerops.guest import GuestProbe


EVENT_LEVELS = {
    'command_sent': logging.INFO,
    'already_in_target_state': logging.WARNING,
    'waiting_state': logging.DEBUG,
    'state_reached': logging.INFO,
    'waiting_condition': logging.DEBUG,
    'probe_failed': logging.DEBUG,
    'condition_latched': logging.INFO,
    'satisfied': logging.INFO,
}


def log_event(event):
    """Default event callback, writes events into the vmwait log."""
    message = '{}: {} (elapsed {}s)'.format(event.vm, event.kind.replace('_', ' '), event.elapsed)
    if event.detail:
        message = '{} {}'.format(message, event.detail)
    logger.log(EVENT_LEVELS.get(event.kind, logging.INFO), message)


class WaitEngine(object):

    def __init__(self, power, guest=None, sleep=time.sleep, on_event=None):
        self.power = power
        self.guest = guest
        self.sleep = sleep
        self.on_event = on_event or log_event

    def emit(self, kind, vm, elapsed=0, detail=None):
        self.on_event(WaitEvent(kind, vm, elapsed, detail))

    def _probe(self, condition, vm):
        if condition == AuxCondition.GUEST_IP_ASSIGNED:
            return self.guest.get_guest_ip(vm)
        elif condition == AuxCondition.GUEST_CUSTOMIZATION_COMPLETE:
            return self.guest.probe_customization_marker(vm)
        raise ValueError('Unknown wait condition {!r}'.format(condition))

    def wait(self, vm, spec):
        """Blocks until vm reaches spec.target and every condition in spec.conditions holds."""
        elapsed = 0
        polls = 0
        if spec.conditions and self.guest is None:
            self.guest = GuestProbe()

        def pause(pending):
            # Limits are checked before sleeping so the wait never overshoots max_wait
            if spec.max_polls is not None and polls >= spec.max_polls:
                raise WaitTimeoutError('{}: giving up after {} polls, still waiting for {}'.format(
                    vm, polls, ', '.join(pending)), elapsed=elapsed, polls=polls, pending=pending)
            if spec.max_wait is not None and elapsed + spec.interval > spec.max_wait:
                raise WaitTimeoutError('{}: giving up after {}s, still waiting for {}'.format(
                    vm, elapsed, ', '.join(pending)), elapsed=elapsed, polls=polls, pending=pending)
            self.sleep(spec.interval)
            return elapsed + spec.interval

        while True:
            state = self.power.get_power_state(vm)
            polls += 1
            if state == spec.target:
                break
            self.emit('waiting_state', vm, elapsed, 'current {}, target {}'.format(state.value, spec.target.value))
            elapsed = pause([spec.target.value])
        self.emit('state_reached', vm, elapsed, state.value)

        satisfied = set()
        pending = spec.ordered_conditions()
        while pending:
            condition = pending[0]
            result = self._probe(condition, vm)
            polls += 1
            if result.ok:
                satisfied.add(condition)
                pending.pop(0)
                self.emit('condition_latched', vm, elapsed, '{} = {}'.format(condition.value, result.value))
                # Next condition is probed right away, only a negative answer costs an interval
                continue

            if result.is_failure:
                if spec.probe_failure == 'escalate':
                    raise ProbeError('{}: {} probe failed: {}'.format(vm, condition.value, result.cause),
                                     condition=condition, cause=result.cause) from result.cause
                self.emit('probe_failed', vm, elapsed, '{}: {}'.format(condition.value, result.cause))
            else:
                self.emit('waiting_condition', vm, elapsed, condition.value)
            elapsed = pause([c.value for c in pending])

        self.emit('satisfied', vm, elapsed)
        return WaitOutcome(state, elapsed, polls, frozenset(satisfied), vm)
