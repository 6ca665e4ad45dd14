#!/usr/bin/env python

import sys
import argparse

from powerops.tools.logger import logger
from powerops.tools.argparser import get_arg_subparsers, argument_loader
from powerops.connector import connect
from powerops.modules import module_loader
from powerops.exceptions import PowerOpsException

from powerops.constants import LOG_LEVEL_CHOICES


def get_parser():
    # load subcommands from modules
    module_loader()

    parser = argparse.ArgumentParser(description='Power VMware vSphere virtual machines on or off and wait for it')
    parser.add_argument('--log-level', help='set log level', choices=LOG_LEVEL_CHOICES)
    parser.add_argument('-q', '--quiet', help='quiet mode, no messages are shown', action='store_true')
    parser.add_argument('-u', '--username', help='login name to use for vcenter', default=None)
    parser.add_argument('-p', '--password', help='password for specified login', default=None)
    parser.add_argument('-s', '--vcenter', help='name of vcenter, which to connect to', default=None)
    parser.add_argument('-i', '--insecure', help='skip SSL verification', action='store_true')
    # Load in options from Command classes
    return get_arg_subparsers(parser)


def main(argv=None):
    commands = module_loader()
    args = argument_loader(get_parser().parse_args(argv))

    if args.log_level:
        logger.setLevel(args.log_level)
    if args.quiet:
        logger.quiet()

    connection = connect(args.vcenter, args.username, args.password, args.insecure)

    # load appropiate command, argparse will handle correct input for us
    command = commands[args.subcommand](connection=connection)

    try:
        command.execute(args)
    except PowerOpsException as e:
        logger.critical(e.message)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning('Interrupted, the power command may still be running in vCenter')
        sys.exit(130)


if __name__ == '__main__':
    main()
