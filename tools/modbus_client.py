#!/usr/bin/env python3
"""
Modbus TCP Client Simulator

Issues one Modbus operation against a remote unit, optionally repeating
it at a fixed interval. Failed iterations are logged and the loop
carries on; Ctrl-C (or SIGTERM) stops it and closes the connection.

Defaults come from config/client.yml; command-line flags override them.

Usage:
  python tools/modbus_client.py -s 192.168.1.10 -o read_holding_registers --start 0 --count 10
  python tools/modbus_client.py -s 192.168.1.10 -o write_single_register --start 5 --value -42
  python tools/modbus_client.py -s 192.168.1.10 -o write_multiple_registers --values=1,-1,300
  python tools/modbus_client.py -s 192.168.1.10 -o read_coils --count 8 -r 0 -i 500
"""

import argparse
import asyncio
import contextlib
import signal
import sys
from pathlib import Path

import yaml

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from components.protocols.modbus.client_settings import Endpoint, RunSettings
from components.protocols.modbus.modbus_protocol import ModbusProtocol
from components.protocols.modbus.operations import (
    ConfigurationError,
    NumericMode,
    OperationKind,
    OperationRequest,
)
from components.protocols.modbus.pymodbus_3114 import PyModbus3114Adapter
from components.protocols.modbus.repeat_scheduler import RepeatScheduler, repeat_policy
from components.reporting.logging_system import (
    EventCategory,
    EventSeverity,
    configure_logging,
    get_logger,
)
from config.config_loader import ConfigLoader

DEFAULT_CONFIG_DIR = project_root / "config"

logger = get_logger("modbus_client")


def create_parser():
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Modbus TCP Client Simulator",
        epilog="""
Operations:
  read_coils, read_discrete_inputs, read_holding_registers, read_input_registers,
  write_single_coil, write_single_register, write_multiple_coils,
  write_multiple_registers

Examples:
  # Read ten holding registers as unsigned values
  python tools/modbus_client.py -s 10.0.0.5 -o read_holding_registers --count 10 -u

  # Write signed values (use '=' when the list starts with a negative number)
  python tools/modbus_client.py -s 10.0.0.5 -o write_multiple_registers --values=-1,2,3

  # Poll coils every 500 ms until interrupted
  python tools/modbus_client.py -s 10.0.0.5 -o read_coils --count 16 -r 0 -i 500
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    target = parser.add_argument_group("target")
    target.add_argument(
        "-s", "--server", help="IP address or hostname of the Modbus TCP server"
    )
    target.add_argument(
        "-p", "--port", type=int, help="Port of the Modbus TCP server (default 502)"
    )
    target.add_argument(
        "-d", "--unitid", type=int, help="Unit id of the Modbus TCP server (default 1)"
    )
    target.add_argument(
        "--timeout", type=float, help="Response timeout in seconds (default 3.0)"
    )

    operation = parser.add_argument_group("operation")
    operation.add_argument(
        "-o",
        "--operation",
        help="Operation to perform: " + "/".join(OperationKind.names()),
    )
    operation.add_argument(
        "--start", type=int, default=0, help="Starting address (default 0)"
    )
    operation.add_argument(
        "--count", type=int, default=1, help="Number of coils/registers to read"
    )
    operation.add_argument(
        "--value", default="0", help="Value for single write operations"
    )
    operation.add_argument(
        "--values",
        help="Comma-separated values for multiple write operations, e.g. 1,2,3",
    )
    operation.add_argument(
        "-u",
        "--unsigned",
        action="store_true",
        help="Interpret read/write values as unsigned integers",
    )

    schedule = parser.add_argument_group("schedule")
    schedule.add_argument(
        "-r",
        "--repeat",
        type=int,
        help="Number of times to run the operation; 0 repeats until interrupted",
    )
    schedule.add_argument(
        "-i",
        "--interval",
        type=int,
        help="Interval between repeats in milliseconds (default 1000)",
    )

    parser.add_argument("--config-dir", help="Directory holding client.yml")
    parser.add_argument("--log-dir", help="Write JSON logs to this directory")

    return parser


# ----------------------------------------------------------------
# Argument conversion
# ----------------------------------------------------------------


def parse_value(text: str, mode: NumericMode) -> int:
    """Parse one decimal value, range-checked for the numeric mode."""
    try:
        value = int(text.strip(), 10)
    except ValueError:
        raise ConfigurationError(f"Invalid value: {text}") from None

    if mode is NumericMode.UNSIGNED:
        low, high = 0, 0xFFFF
    else:
        low, high = -0x8000, 0x7FFF

    if not low <= value <= high:
        raise ConfigurationError(
            f"Invalid value: {text} (expected {low} to {high} in {mode.value} mode)"
        )
    return value


def parse_values(text: str | None, mode: NumericMode) -> tuple[int, ...]:
    if not text:
        return ()
    return tuple(parse_value(item, mode) for item in text.split(","))


def _pick(arg_value, config_value):
    return config_value if arg_value is None else arg_value


def build_settings(args: argparse.Namespace, config: dict) -> RunSettings:
    """
    Combine parsed arguments with the loaded configuration.

    Raises:
        ConfigurationError: On any invalid or missing parameter
    """
    target = config["target"]
    schedule = config["schedule"]

    if not args.operation:
        raise ConfigurationError("Operation is required")
    kind = OperationKind.from_name(args.operation)

    mode = NumericMode.UNSIGNED if args.unsigned else NumericMode.SIGNED
    request = OperationRequest(
        kind=kind,
        start=args.start,
        quantity=args.count,
        value=parse_value(args.value, mode),
        values=parse_values(args.values, mode),
        mode=mode,
    )

    endpoint = Endpoint(
        host=args.server or target["host"],
        port=int(_pick(args.port, target["port"])),
        unit_id=int(_pick(args.unitid, target["unit_id"])),
        timeout=float(_pick(args.timeout, target["timeout"])),
        retries=int(target["retries"]),
    )

    interval_ms = int(_pick(args.interval, schedule["interval_ms"]))
    if interval_ms < 0:
        raise ConfigurationError(f"Interval must not be negative, got {interval_ms}")

    return RunSettings(
        endpoint=endpoint,
        request=request,
        policy=repeat_policy(int(_pick(args.repeat, schedule["repeat"]))),
        interval_ms=interval_ms,
    )


# ----------------------------------------------------------------
# Execution
# ----------------------------------------------------------------


async def run(settings: RunSettings) -> int:
    """Connect, run the scheduler and always close the connection."""
    endpoint = settings.endpoint
    adapter = PyModbus3114Adapter(
        host=endpoint.host,
        port=endpoint.port,
        device_id=endpoint.unit_id,
        timeout=endpoint.timeout,
        retries=endpoint.retries,
    )

    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    sigterm_installed = False
    with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
        loop.add_signal_handler(signal.SIGTERM, task.cancel)
        sigterm_installed = True

    try:
        logger.info(f"Connecting to {endpoint}")
        async with ModbusProtocol(adapter) as protocol:
            scheduler = RepeatScheduler(
                protocol,
                settings.request,
                settings.policy,
                settings.interval_ms,
            )
            await scheduler.run()
    finally:
        if sigterm_installed:
            loop.remove_signal_handler(signal.SIGTERM)
        logger.info(f"Connection to {endpoint} closed")

    return 0


async def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = ConfigLoader(args.config_dir or DEFAULT_CONFIG_DIR).load_all()
        configure_logging(
            log_dir=args.log_dir or config["logging"]["log_dir"],
            level=config["logging"]["level"],
        )
        settings = build_settings(args, config)
    except (ValueError, yaml.YAMLError) as e:
        await logger.log_event(
            EventSeverity.CRITICAL,
            EventCategory.CONFIGURATION,
            f"Configuration error: {e}",
        )
        return 1

    try:
        return await run(settings)
    except asyncio.CancelledError:
        logger.warning("Interrupted by user")
        return 130


def cli() -> int:
    try:
        return asyncio.run(main())
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(cli())
