import sys

from powerops.modules import BaseCommands
from powerops.tools.argparser import args
from powerops.exceptions import PowerOpsException
from powerops.inventory import ByName, ByHandle, FromSequence, resolve_identity
from powerops.guest import GuestCommandExecutor, GuestProbe
from powerops.power import PowerManager, start_and_wait, stop_and_wait


def format_outcome(outcome):
    satisfied = ','.join(sorted(c.value for c in outcome.satisfied)) or '-'
    return '{} {} elapsed={}s polls={} conditions={}'.format(
        outcome.vm, outcome.final_state.value, outcome.elapsed, outcome.polls, satisfied)


class VmCommands(BaseCommands):
    """Shared vm identity arguments of the power subcommands."""

    def __init__(self, *args, **kwargs):
        super(VmCommands, self).__init__(*args, **kwargs)

    @args('--name', help='name of the vm, first match is used when the name is not unique')
    @args('--moid', help='managed object id of the vm, e.g. vm-42')
    @args('--stdin', help='read managed object ids or vm names from standard input, one per line',
          action='store_true')
    def identity_sources(self, args):
        """Yields one identity source per VM to operate on."""
        if args.stdin:
            handles = [line.strip() for line in sys.stdin if line.strip()]
            if not handles:
                raise PowerOpsException('No VM handles on standard input!')
            source = FromSequence(handles)
            for _ in handles:
                yield source
        elif args.moid:
            yield ByHandle(args.moid)
        elif args.name:
            yield ByName(args.name)
        else:
            raise PowerOpsException('One of --name, --moid or --stdin is required!')


class WaitCommands(VmCommands):
    """Shared polling arguments of the commands which wait for a power state."""

    @args('--interval', help='seconds between polls (1-3600)', map='POLL_INTERVAL')
    @args('--max-wait', help='give up after this many seconds, 0 waits forever', map='MAX_WAIT')
    @args('--max-polls', help='give up after this many polls, 0 waits forever', type=int, map='MAX_POLLS')
    @args('--result', help='print the final state of the vm', action='store_true')
    def wait_options(self, args):
        return dict(interval=args.interval, max_wait=args.max_wait, max_polls=args.max_polls,
                    return_result=args.result)

    def report(self, outcome):
        if outcome is not None:
            print(format_outcome(outcome))


class StopCommands(WaitCommands):
    """shut down guest of a vm and wait until it is powered off."""

    def execute(self, args):
        for source in self.identity_sources(args):
            self.report(stop_and_wait(source, **self.wait_options(args)))


class StartCommands(WaitCommands):
    """power on a vm and wait until it is running."""

    def execute(self, args):
        options = self.wait_options(args)
        options.update(self.guest_options(args))
        for source in self.identity_sources(args):
            self.report(start_and_wait(source, **options))

    @args('--wait-for-ip', help='wait until vmware tools report an ip address', action='store_true')
    @args('--wait-for-customization', help='wait until guest customization has finished', action='store_true')
    @args('--guest-user', help="guest's user under which to run the customization probe", map='VM_GUEST_USER')
    @args('--guest-pass', help="guest user's password", map='VM_GUEST_PASS')
    @args('--escalate-probe-failures', help='fail instead of retrying when a guest probe fails',
          action='store_true')
    def guest_options(self, args):
        guest = None
        if args.wait_for_customization:
            guest = GuestProbe(GuestCommandExecutor(args.guest_user, args.guest_pass))
        return dict(wait_for_ip=args.wait_for_ip, wait_for_customization=args.wait_for_customization,
                    probe_failure='escalate' if args.escalate_probe_failures else 'retry', guest=guest)


class StateCommands(VmCommands):
    """show power state of a vm."""

    def execute(self, args):
        power = PowerManager()
        for source in self.identity_sources(args):
            vm = resolve_identity(source)
            print('{} {}'.format(vm, power.get_power_state(vm).value))


BaseCommands.register('stop', StopCommands)
BaseCommands.register('start', StartCommands)
BaseCommands.register('state', StateCommands)
