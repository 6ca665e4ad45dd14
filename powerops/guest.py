import time

from pyVmomi import vim, vmodl

from powerops import config as conf
from powerops.tools.logger import logger
from powerops.exceptions import PowerOpsException
from powerops.models import ProbeResult
from powerops.constants import VM_TOOLS_RUNNING, GUEST_CMD_POLL_DELAY


# Faults which mean the guest could not be asked, not that the answer is negative
PROBE_ERRORS = (vmodl.MethodFault, PowerOpsException, OSError)


def tools_running(vm):
    return vm.guest.toolsRunningStatus == VM_TOOLS_RUNNING


class GuestCommandExecutor(object):
    """Runs programs inside guest's operating system through VMware tools guest operations."""

    def __init__(self, guest_user=None, guest_pass=None, timeout=None, sleep=time.sleep):
        self.guest_user = guest_user or conf.VM_GUEST_USER
        self.guest_pass = guest_pass or conf.VM_GUEST_PASS
        self.timeout = timeout or conf.GUEST_CMD_TIMEOUT
        self.sleep = sleep

    @staticmethod
    def _process_manager(vm):
        # Guest operations are reached through the same session the VM handle was retrieved with
        content = vim.ServiceInstance('ServiceInstance', vm._stub).RetrieveContent()
        return content.guestOperationsManager.processManager

    def run(self, vm, program, arguments=''):
        """Starts program inside the guest, waits for it to end and returns its exit code."""
        if not tools_running(vm):
            raise PowerOpsException("Guest's VMware tools are not running. Aborting...")

        credentials = vim.vm.guest.NamePasswordAuthentication(username=self.guest_user, password=self.guest_pass)
        process_manager = self._process_manager(vm)
        progspec = vim.vm.guest.ProcessManager.ProgramSpec(programPath=program, arguments=arguments)

        logger.debug('Running command "{} {}" inside guest'.format(program, arguments))
        try:
            pid = process_manager.StartProgramInGuest(vm, credentials, progspec)
        except vim.fault.FileNotFound as e:
            raise PowerOpsException(e.msg + '. Try providing absolute path to the binary.')
        except vim.fault.InvalidGuestLogin as e:
            raise PowerOpsException(e.msg)

        time_wait = 0
        while True:
            processes = process_manager.ListProcessesInGuest(vm, credentials, [pid])
            if processes and processes[0].endTime is not None:
                logger.debug('Guest process {} exited with {}'.format(pid, processes[0].exitCode))
                return processes[0].exitCode
            if time_wait >= self.timeout:
                raise PowerOpsException('Timeout reached while waiting for guest process {} to end'.format(pid))
            self.sleep(GUEST_CMD_POLL_DELAY)
            time_wait += GUEST_CMD_POLL_DELAY


class GuestProbe(object):
    """Guest introspection used by the wait engine. Probes never raise, every outcome
    is reported as ProbeResult."""

    def __init__(self, executor=None, program=None, arguments=None):
        self.executor = executor or GuestCommandExecutor()
        self.program = program or conf.CUSTOMIZATION_PROGRAM
        self.arguments = arguments if arguments is not None else conf.CUSTOMIZATION_ARGS

    def get_guest_ip(self, vm):
        """IP address reported by VMware tools running in the guest."""
        try:
            address = vm.vm.guest.ipAddress
        except PROBE_ERRORS as e:
            return ProbeResult.failed(e)

        if address:
            return ProbeResult.success(address)
        return ProbeResult.not_yet()

    def probe_customization_marker(self, vm):
        """Checks for the first-boot customization marker by running the probe program in the guest."""
        try:
            if not tools_running(vm.vm):
                return ProbeResult.not_yet()
            exit_code = self.executor.run(vm.vm, self.program, self.arguments)
        except PROBE_ERRORS as e:
            return ProbeResult.failed(e)

        if exit_code == 0:
            return ProbeResult.success(True)
        return ProbeResult.not_yet()
