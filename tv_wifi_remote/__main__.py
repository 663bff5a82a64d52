#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import json
import asyncio
import logging

from tv_wifi_remote.internal_types import *

from tv_wifi_remote import (
    __version__ as pkg_version,
    RemoteController,
    BrandRegistry,
    NetworkProbe,
    TvRemoteConfig,
    DiscoveredDevice,
    DEFAULT_DISCOVERY_TIMEOUT,
  )

class CmdExitError(RuntimeError):
    exit_code: int

    def __init__(self, exit_code: int, msg: Optional[str]=None):
        if msg is None:
            msg = f"Command exited with return code {exit_code}"
        super().__init__(msg)
        self.exit_code = exit_code

class ArgparseExitError(CmdExitError):
    pass

class NoExitArgumentParser(argparse.ArgumentParser):
    def exit(self, status=0, message=None):
        if message:
            self._print_message(message, sys.stderr)
        raise ArgparseExitError(status, message)

class CommandHandler:
    _argv: Optional[Sequence[str]]
    _parser: argparse.ArgumentParser
    _args: argparse.Namespace
    _provide_traceback: bool = True

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    def _get_config(self) -> TvRemoteConfig:
        bind_addresses: Optional[List[str]] = getattr(self._args, 'bind_addresses', None)
        if bind_addresses is not None and len(bind_addresses) == 0:
            bind_addresses = None
        config = TvRemoteConfig(
            bind_addresses=None if bind_addresses is None else tuple(bind_addresses),
            vizio_auth_token=getattr(self._args, 'vizio_auth_token', None),
          )
        wait_time: Optional[float] = getattr(self._args, 'wait_time', None)
        if wait_time is not None:
            config = config.evolve(discovery_timeout=wait_time)
        sony_psk: Optional[str] = getattr(self._args, 'sony_psk', None)
        if sony_psk is not None:
            config = config.evolve(sony_psk=sony_psk)
        return config

    def _create_controller(self) -> RemoteController:
        return RemoteController(BrandRegistry(config=self._get_config()))

    async def cmd_bare(self) -> int:
        print("A command is required", file=sys.stderr)
        return 1

    async def cmd_discover(self) -> int:
        controller = self._create_controller()
        brand: str = self._args.brand
        devices = await controller.discover_devices(brand, timeout=self._args.wait_time)
        for device in devices:
            print(json.dumps(device.to_jsonable(), indent=2, sort_keys=True))
            sys.stdout.flush()
        if len(devices) == 0:
            print(f"No {brand} devices found", file=sys.stderr)
        return 0

    async def cmd_send(self) -> int:
        controller = self._create_controller()
        brand: str = self._args.brand
        ip_address: str = self._args.ip_address
        port: Optional[int] = self._args.port
        if port is None:
            connected = await controller.connect_by_address(brand, ip_address)
        else:
            device = DiscoveredDevice(name=f"{brand} TV", ip_address=ip_address, brand=brand, port=port)
            connected = await controller.connect(brand, device)
        if not connected:
            raise CmdExitError(1, f"Unable to connect to {brand} TV at {ip_address}")
        rc = 0
        try:
            for button in self._args.buttons:
                sent = await controller.send_command(button)
                print(json.dumps(dict(button=button, sent=sent), sort_keys=True))
                if not sent:
                    rc = 1
        finally:
            controller.disconnect()
        return rc

    async def cmd_brands(self) -> int:
        registry = BrandRegistry(config=self._get_config())
        summary: JsonableDict = { brand: registry.protocol_name_for(brand) for brand in registry.native_brands }
        print(json.dumps(summary, indent=2, sort_keys=True))
        return 0

    async def cmd_local_ip(self) -> int:
        ip_address = NetworkProbe(self._get_config()).local_ipv4_address()
        if ip_address is None:
            raise CmdExitError(1, "No local IPv4 address found")
        print(ip_address)
        return 0

    async def cmd_version(self) -> int:
        print(pkg_version)
        return 0

    async def arun(self) -> int:
        """Run the tv-wifi-remote command-line tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(prog="tv-wifi-remote", description="Discover and control smart TVs over WiFi.")


        # ======================= Main command

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.set_defaults(func=self.cmd_bare)

        subparsers = parser.add_subparsers(
                            title='Commands',
                            description='Valid commands',
                            help='Additional help available with "<command-name> -h"')

        # ======================= discover

        parser_discover = subparsers.add_parser('discover', description="Search the local network for TVs of a brand")
        parser_discover.add_argument('--brand', default="generic",
                            help='''The TV brand to search for. Unknown brands find every SSDP device. Default: "generic"''')
        parser_discover.add_argument('--wait-time', type=float, default=DEFAULT_DISCOVERY_TIMEOUT,
                            help=f'''The amount of time to wait for responses, in seconds. Default: {DEFAULT_DISCOVERY_TIMEOUT}''')
        parser_discover.add_argument('-b', '--bind', dest="bind_addresses", action='append', default=[],
                            help='''The local unicast IP address to search from. May be repeated. Default: all local non-loopback unicast addresses.''')
        parser_discover.set_defaults(func=self.cmd_discover)

        # ======================= send

        parser_send = subparsers.add_parser('send', description="Connect to a TV and press one or more buttons")
        parser_send.add_argument('--brand', required=True,
                            help='''The TV brand, which selects the control protocol.''')
        parser_send.add_argument('--ip', dest='ip_address', required=True,
                            help='''The IPv4 address of the TV.''')
        parser_send.add_argument('--port', type=int, default=None,
                            help='''The control port. Default: the brand's standard port''')
        parser_send.add_argument('--sony-psk', dest='sony_psk', default=None,
                            help='''Pre-shared key for Sony Bravia sets. Default: "0000"''')
        parser_send.add_argument('--vizio-auth-token', dest='vizio_auth_token', default=None,
                            help='''AUTH token for Vizio SmartCast sets.''')
        parser_send.add_argument('buttons', nargs='+', metavar='BUTTON',
                            help='''Button names to press in order; e.g., "Power", "Volume_Up", "OK".''')
        parser_send.set_defaults(func=self.cmd_send)

        # ======================= brands

        parser_brands = subparsers.add_parser('brands',
                                description='''List the brands with a dedicated control protocol.''')
        parser_brands.set_defaults(func=self.cmd_brands)

        # ======================= local-ip

        parser_local_ip = subparsers.add_parser('local-ip',
                                description='''Display this host's preferred IPv4 address.''')
        parser_local_ip.set_defaults(func=self.cmd_local_ip)

        # ======================= version

        parser_version = subparsers.add_parser('version',
                                description='''Display version information.''')
        parser_version.set_defaults(func=self.cmd_version)

        # =========================================================

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            func: Callable[[], Awaitable[int]] = args.func
            logging.debug(f"Running command {func.__name__}, tb = {traceback}")
            rc = await func()
            logging.debug(f"Command {func.__name__} returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            print(f"tv-wifi-remote: error: {ex}", file=sys.stderr)
        except BaseException as ex:
            print(f"tv-wifi-remote: Unhandled exception: {ex}", file=sys.stderr)
            raise

        return rc

    def run(self) -> int:
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            rc = loop.run_until_complete(self.arun())
        finally:
            loop.close()
        return rc

def run(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

async def arun(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = await CommandHandler(argv).arun()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    sys.exit(run())
