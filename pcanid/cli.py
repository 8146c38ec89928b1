"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from pcanid.core.config import (
    parse_number,
    query_config,
    set_device_id_config,
    set_serial_number_config,
)
from pcanid.core.errors import PcanIdError
from pcanid.core.model import (
    DiscoveredDevice,
    OperationResult,
    QueryDeviceId,
    QuerySerialNumber,
    RunConfig,
    SetDeviceId,
    SetSerialNumber,
)
from pcanid.core.service import PcanIdService

app = typer.Typer(help="Query and change the device id and serial number of PEAK PCAN-USB adapters")

DEVICE_HELP = "Device index as shown by 'pcanid list' (default: 0)"


def _build_service() -> PcanIdService:
    service = PcanIdService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def format_device(device: DiscoveredDevice) -> str:
    return (
        f"{device.index}: {device.vendor_id:04x}:{device.product_id:04x} "
        f"Bus {device.bus:03d} Device {device.address:03d} \"{device.supported.name}\""
    )


def _field(label: str, value: object) -> str:
    return f"{label:>20}: {value}"


def _format_result(result: OperationResult) -> str | None:
    operation = result.operation
    if isinstance(operation, QueryDeviceId):
        shown = "<unavailable>" if result.value is None else f"0x{result.value:x}"
        return _field("device_id", shown)
    if isinstance(operation, QuerySerialNumber):
        shown = "<unavailable>" if result.value is None else f"0x{result.value:x}"
        return _field("serial_number", shown)
    if isinstance(operation, SetDeviceId) and result.ok:
        return f"Set device_id to 0x{operation.device_id:x}"
    if isinstance(operation, SetSerialNumber) and result.ok:
        return f"Set serial_number to 0x{operation.serial_number:x}"
    return None


def _run(config: RunConfig) -> None:
    service = _build_service()
    report = service.run(config)
    if report.strings.manufacturer:
        typer.echo(_field("iManufacturer", report.strings.manufacturer))
    if report.strings.product:
        typer.echo(_field("iProduct", report.strings.product))
    typer.echo("")

    for result in report.results:
        for error in result.errors:
            typer.echo(f"Error: {error}", err=True)
        line = _format_result(result)
        if line is not None:
            typer.echo(line)

    if not report.ok:
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if ctx.invoked_subcommand is None:
        typer.echo("Error: Please specify one of: list, query, set-id, set-serial.", err=True)
        typer.echo(ctx.get_help(), err=True)
        raise typer.Exit(code=1)


@app.command("list")
def list_devices() -> None:
    """List attached supported devices."""
    try:
        service = _build_service()
        devices = service.list_devices()
        if not devices:
            typer.echo("No supported devices found")
            return

        for device in devices:
            typer.echo(format_device(device))
    except PcanIdError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("query")
def query(
    device: str = typer.Option("0", "--device", "-d", help=DEVICE_HELP),
    id_only: bool = typer.Option(False, "--id-only", help="Only query the device id"),
    serial_only: bool = typer.Option(False, "--serial-only", help="Only query the serial number"),
) -> None:
    """Query the device id and serial number."""
    try:
        config = query_config(
            parse_number(device),
            device_id=not serial_only,
            serial_number=not id_only,
        )
        _run(config)
    except PcanIdError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("set-id")
def set_device_id(
    value: str = typer.Argument(..., help="New device id, 0..254 (decimal or 0x hex)"),
    device: str = typer.Option("0", "--device", "-d", help=DEVICE_HELP),
) -> None:
    """Set the device id."""
    try:
        _run(set_device_id_config(parse_number(value), parse_number(device)))
    except PcanIdError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("set-serial")
def set_serial_number(
    value: str = typer.Argument(..., help="New serial number, 0..4294967295 (decimal or 0x hex)"),
    device: str = typer.Option("0", "--device", "-d", help=DEVICE_HELP),
) -> None:
    """Set the serial number."""
    try:
        _run(set_serial_number_config(parse_number(value), parse_number(device)))
    except PcanIdError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
