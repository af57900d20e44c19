"""Register transport contract and its Modbus TCP implementation."""

from __future__ import annotations

import logging
from typing import Any, List, Protocol, Sequence

from pymodbus.client import ModbusTcpClient
from pymodbus.exceptions import ModbusException

from .codec import check_u16

logger = logging.getLogger(__name__)

DEFAULT_MODBUS_PORT = 502


class TransportError(IOError):
    """Raised when a register read/write or the connection itself fails."""


class RegisterTransport(Protocol):
    """Contract the controller needs from a holding-register connection."""

    def read_registers(self, start: int, count: int) -> Sequence[int]:
        """Read `count` consecutive holding registers starting at `start`."""

    def write_register(self, address: int, value: int) -> None:
        """Write one holding register."""


def split_host_port(address: str, default_port: int = DEFAULT_MODBUS_PORT) -> tuple[str, int]:
    """Split `host[:port]` into its parts."""

    host = str(address or "").strip()
    if host.count(":") == 1:
        host, raw_port = host.split(":", 1)
        host = host.strip()
        try:
            return host, int(raw_port.strip())
        except ValueError as exc:
            raise TransportError(f"Invalid port in address '{address}'.") from exc
    return host, int(default_port)


class ModbusTcpTransport:
    """Owns one pymodbus TCP client bound to a single servo."""

    def __init__(
        self,
        address: str,
        port: int = DEFAULT_MODBUS_PORT,
        unit_id: int = 1,
        timeout_s: float = 1.0,
    ):
        self.host, self.port = split_host_port(address, port)
        self.unit_id = int(unit_id)
        self.timeout_s = float(timeout_s)
        self._client: ModbusTcpClient | None = None

    def __enter__(self) -> "ModbusTcpTransport":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        if self._client is not None:
            return
        client = ModbusTcpClient(self.host, port=self.port, timeout=self.timeout_s)
        if not client.connect():
            client.close()
            raise TransportError(f"Unable to create TCP connection to {self.host}:{self.port}")
        self._client = client
        logger.debug("Connected to %s:%d (unit %d)", self.host, self.port, self.unit_id)

    def close(self) -> None:
        if self._client is None:
            return
        try:
            self._client.close()
        finally:
            self._client = None

    def read_registers(self, start: int, count: int) -> List[int]:
        rr = self._call("read_holding_registers", check_u16(start, "address"), count=int(count))
        registers = list(getattr(rr, "registers", None) or [])
        if len(registers) < count:
            raise TransportError(
                f"Short read at register {start}: expected={count} got={len(registers)}"
            )
        return registers[:count]

    def write_register(self, address: int, value: int) -> None:
        self._call(
            "write_register",
            check_u16(address, "address"),
            check_u16(value),
        )

    def _call(self, fn_name: str, *args: Any, **kwargs: Any) -> Any:
        if self._client is None:
            raise TransportError("Transport is not connected.")
        fn = getattr(self._client, fn_name)

        # pymodbus renamed the unit keyword across releases.
        try:
            for key in ("device_id", "slave", "unit"):
                try:
                    rr = fn(*args, **{**kwargs, key: self.unit_id})
                    break
                except TypeError:
                    continue
            else:
                rr = fn(*args, **kwargs)
        except ModbusException as exc:
            raise TransportError(f"{fn_name} failed at {args[0]}: {exc}") from exc

        if rr is None or rr.isError():
            raise TransportError(f"{fn_name} failed at {args[0]}: {rr}")
        return rr
