"""Resolution of the caller supplied VM identity into a single VMIdentity.

Callers can name a VM (optionally on a specific vCenter), pass an already retrieved
handle or feed handles one at a time from an iterable. Every form ends up in
resolve_identity() so the power operations have one code path.
"""
import re

from pyVmomi import vim, vmodl

from powerops import connector
from powerops.constants import VM_MOID_PATTERN
from powerops.tools.logger import logger
from powerops.exceptions import NotFoundError
from powerops.models import VMIdentity


class ByName(object):
    """VM looked up by its inventory name on server (None means the default session)."""

    def __init__(self, name, server=None):
        self.name = name
        self.server = server

    def __repr__(self):
        return 'ByName({!r}, server={!r})'.format(self.name, self.server)


class ByHandle(object):
    """VM given as vim.VirtualMachine, VMIdentity or managed object id such as 'vm-42'."""

    def __init__(self, handle, server=None):
        self.handle = handle
        self.server = server

    def __repr__(self):
        return 'ByHandle({!r})'.format(self.handle)


class FromSequence(object):
    """Handles delivered one at a time, every resolution consumes the next one. Items can be
    identity sources, VM objects, managed object ids or VM names."""

    def __init__(self, handles, server=None):
        self.handles = iter(handles)
        self.server = server

    def __repr__(self):
        return 'FromSequence(server={!r})'.format(self.server)


class Inventory(object):
    """Looks virtual machines up through the vCenter session registered in powerops.connector."""

    def __init__(self, get_connection=connector.get_connection):
        self._get_connection = get_connection

    def resolve_by_name(self, name, server=None):
        """Returns every VM named name, in the order vCenter lists them."""
        content = self._get_connection(server).RetrieveContent()
        container = content.viewManager.CreateContainerView(content.rootFolder, [vim.VirtualMachine], True)
        try:
            logger.info('Loading VMware object: {}'.format(name))
            matches = [VMIdentity(vm, name=name) for vm in container.view if vm.name == name]
        finally:
            container.Destroy()

        for vm in matches:
            logger.debug('Found matching object {!r}'.format(vm))
        return matches

    def resolve_by_handle(self, handle, server=None):
        if isinstance(handle, VMIdentity):
            return handle
        if isinstance(handle, str):
            stub = self._get_connection(server)._stub
            handle = vim.VirtualMachine(handle, stub)

        # Binding a moid does not contact vCenter, reading the name makes sure the VM exists
        try:
            name = handle.name
        except vmodl.fault.ManagedObjectNotFound as e:
            raise NotFoundError('VM {} not found!'.format(handle._GetMoId())) from e
        return VMIdentity(handle, name=name)


def resolve_identity(source, inventory=None):
    """Produces exactly one VMIdentity from any of the supported identity sources.
    Name lookups matching several VMs pick the first one vCenter returned."""
    inventory = inventory or Inventory()

    if isinstance(source, ByName):
        matches = inventory.resolve_by_name(source.name, source.server)
        if not matches:
            raise NotFoundError('VM with name {} not found!'.format(source.name))
        if len(matches) > 1:
            logger.warning('{} VMs named {} found, using the first one: {}'.format(
                len(matches), source.name, matches[0].moid))
        return matches[0]

    if isinstance(source, ByHandle):
        return inventory.resolve_by_handle(source.handle, source.server)

    if isinstance(source, FromSequence):
        try:
            handle = next(source.handles)
        except StopIteration:
            raise NotFoundError('No more VMs in the input sequence!')
        if isinstance(handle, (ByName, ByHandle)):
            return resolve_identity(handle, inventory)
        if isinstance(handle, str) and not re.match(VM_MOID_PATTERN, handle):
            return resolve_identity(ByName(handle, source.server), inventory)
        return inventory.resolve_by_handle(handle, source.server)

    raise TypeError('Unsupported identity source {!r}'.format(source))
