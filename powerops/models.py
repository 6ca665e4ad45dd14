from collections import namedtuple
from enum import Enum

from powerops.constants import VM_POWERED_ON, VM_POWERED_OFF, VM_SUSPENDED, PROBE_FAILURE_POLICIES
from powerops.exceptions import InvalidWaitSpec
from powerops.tools import convert_to_int, normalize_interval, normalize_limit


class PowerState(Enum):
    POWERED_ON = VM_POWERED_ON
    POWERED_OFF = VM_POWERED_OFF
    SUSPENDED = VM_SUSPENDED
    UNKNOWN = 'unknown'

    @classmethod
    def from_vim(cls, value):
        """Maps vim.VirtualMachinePowerState (or its string form) to PowerState."""
        try:
            return cls(str(value))
        except ValueError:
            return cls.UNKNOWN


class AuxCondition(Enum):
    GUEST_IP_ASSIGNED = 'guest-ip'
    GUEST_CUSTOMIZATION_COMPLETE = 'guest-customization'


# Auxiliary conditions are always evaluated in this order
CONDITION_ORDER = (AuxCondition.GUEST_IP_ASSIGNED, AuxCondition.GUEST_CUSTOMIZATION_COMPLETE)


class VMIdentity(object):
    """Reference to a single VM on a vCenter connection. Two identities are equal when they point
    to the same managed object id on the same server, names are not unique and are never compared."""

    def __init__(self, vm, name=None):
        self.vm = vm
        self.moid = vm._GetMoId()
        # Moids are only unique within one vCenter
        self.server = getattr(vm, '_serverGuid', None) or getattr(vm, '_stub', None)
        self._name = name

    @property
    def name(self):
        if self._name is None:
            self._name = self.vm.name
        return self._name

    def __eq__(self, other):
        if not isinstance(other, VMIdentity):
            return NotImplemented
        return self.moid == other.moid and self.server == other.server

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.moid, self.server))

    def __repr__(self):
        return 'VMIdentity({})'.format(self.moid)

    def __str__(self):
        if self._name is None:
            return self.moid
        return '{} ({})'.format(self._name, self.moid)


class WaitSpec(namedtuple('WaitSpec', ['target', 'interval', 'conditions', 'max_wait', 'max_polls',
                                       'probe_failure'])):
    """Immutable configuration of one wait. Use WaitSpec.create() which validates all values."""

    __slots__ = ()

    @classmethod
    def create(cls, target, interval=5, conditions=(), max_wait=None, max_polls=None, probe_failure='retry'):
        if not isinstance(target, PowerState):
            raise InvalidWaitSpec('Target must be a PowerState, got {!r}'.format(target))
        if probe_failure not in PROBE_FAILURE_POLICIES:
            raise InvalidWaitSpec('Probe failure policy must be one of {}'.format(', '.join(PROBE_FAILURE_POLICIES)))

        conditions = frozenset(conditions)
        for condition in conditions:
            if not isinstance(condition, AuxCondition):
                raise InvalidWaitSpec('Unknown wait condition {!r}'.format(condition))

        return cls(target, normalize_interval(interval), conditions, normalize_limit(max_wait, 'Maximum wait'),
                   normalize_limit(max_polls, 'Maximum polls', convert_to_int), probe_failure)

    def ordered_conditions(self):
        return [c for c in CONDITION_ORDER if c in self.conditions]


WaitOutcome = namedtuple('WaitOutcome', ['final_state', 'elapsed', 'polls', 'satisfied', 'vm'])

WaitEvent = namedtuple('WaitEvent', ['kind', 'vm', 'elapsed', 'detail'])


class ProbeResult(object):
    """Outcome of one guest probe: success with a value, not yet, or failed with a cause."""

    SUCCESS = 'success'
    NOT_YET = 'not-yet'
    FAILED = 'failed'

    __slots__ = ('status', 'value', 'cause')

    def __init__(self, status, value=None, cause=None):
        self.status = status
        self.value = value
        self.cause = cause

    @classmethod
    def success(cls, value):
        return cls(cls.SUCCESS, value=value)

    @classmethod
    def not_yet(cls):
        return cls(cls.NOT_YET)

    @classmethod
    def failed(cls, cause):
        return cls(cls.FAILED, cause=cause)

    @property
    def ok(self):
        return self.status == self.SUCCESS

    @property
    def is_failure(self):
        return self.status == self.FAILED

    def __repr__(self):
        if self.status == self.SUCCESS:
            return 'ProbeResult.success({!r})'.format(self.value)
        if self.status == self.FAILED:
            return 'ProbeResult.failed({!r})'.format(self.cause)
        return 'ProbeResult.not_yet()'
