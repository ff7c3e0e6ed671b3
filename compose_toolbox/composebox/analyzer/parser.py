"""Structural parser: Compose text to ``ParsedComposeData``.

The parser has no error channel. Anything it cannot make sense of is left
out of the result, and the validator is responsible for saying why.
"""

from __future__ import annotations

from composebox.analyzer.lines import (
    BLOCK_SCALAR_RE,
    LineRole,
    SourceLine,
    classify_document,
    is_mapping_entry,
    unquote,
)
from composebox.analyzer.models import (
    EnvironmentVariable,
    NetworkConfig,
    ParsedComposeData,
    PortMapping,
    ServiceConfig,
    ServiceNetwork,
    Sysctl,
    VolumeMapping,
)
from composebox.analyzer.sections import (
    Block,
    network_blocks,
    service_blocks,
    volume_blocks,
)


def _strip_quotes(text: str) -> str:
    return text.replace('"', "").replace("'", "").strip()


def split_pair(text: str) -> tuple[str, str] | None:
    """First two colon-separated segments, both required to be non-empty."""
    parts = text.split(":")
    if len(parts) < 2:
        return None
    host, container = parts[0].strip(), parts[1].strip()
    if not host or not container:
        return None
    return host, container


def _scalar(service: Block, key: str) -> str | None:
    block = service.child(key)
    if block is None:
        return None
    return unquote(block.value) or None


def _list_entries(service: Block, key: str) -> list[tuple[SourceLine, str]]:
    block = service.child(key)
    return block.entries() if block is not None else []


def _parse_command(service: Block) -> str | list[str] | None:
    block = service.child("command")
    if block is None:
        return None
    if block.is_flow_list:
        return [unquote(text) for _, text in block.entries()]
    if block.value and not BLOCK_SCALAR_RE.match(block.value):
        return unquote(block.value)

    parts: list[str] = []
    for line in block.content():
        if line.in_block_scalar:
            parts.append(line.trimmed)
        elif line.role is LineRole.list_item:
            if line.item:
                parts.append(unquote(line.item))
        elif line.indent >= 4:
            parts.append(line.trimmed)
    return parts or None


def _parse_ports(service: Block) -> list[PortMapping]:
    ports: list[PortMapping] = []
    for _, text in _list_entries(service, "ports"):
        text = _strip_quotes(text)
        if is_mapping_entry(text):
            continue
        pair = split_pair(text)
        if pair:
            ports.append(PortMapping(host=pair[0], container=pair[1]))
    return ports


def _parse_volumes(service: Block) -> list[VolumeMapping]:
    volumes: list[VolumeMapping] = []
    for _, text in _list_entries(service, "volumes"):
        text = _strip_quotes(text)
        if is_mapping_entry(text):
            continue
        pair = split_pair(text)
        if pair:
            volumes.append(VolumeMapping(host=pair[0], container=pair[1]))
    return volumes


def _parse_environment(service: Block) -> list[EnvironmentVariable]:
    block = service.child("environment")
    if block is None:
        return []

    found: list[tuple[int, EnvironmentVariable]] = []
    for line, text in block.entries():
        key, sep, value = unquote(text).partition("=")
        if key.strip():
            found.append(
                (line.number, EnvironmentVariable(key=key.strip(), value=value if sep else None))
            )
    for line in block.children():
        value = unquote(line.value or "")
        found.append(
            (line.number, EnvironmentVariable(key=unquote(line.key or ""), value=value or None))
        )
    return [env for _, env in sorted(found, key=lambda pair: pair[0])]


def _parse_service_networks(service: Block) -> list[ServiceNetwork]:
    block = service.child("networks")
    if block is None:
        return []

    found: list[tuple[int, ServiceNetwork]] = []
    for line, text in block.entries():
        if text:
            found.append((line.number, ServiceNetwork(name=unquote(text))))
    for network in block.child_blocks():
        ip = None
        address = network.child("ipv4_address")
        if address is not None:
            ip = unquote(address.value) or None
        found.append((network.header.number, ServiceNetwork(name=network.header.key or "", ip=ip)))
    return [net for _, net in sorted(found, key=lambda pair: pair[0])]


def _parse_depends_on(service: Block) -> list[str]:
    block = service.child("depends_on")
    if block is None:
        return []
    found = [(line.number, unquote(text)) for line, text in block.entries() if text]
    found.extend((line.number, line.key or "") for line in block.children())
    return [name for _, name in sorted(found)]


def _parse_sysctls(service: Block) -> list[Sysctl]:
    block = service.child("sysctls")
    if block is None:
        return []

    found: list[tuple[int, Sysctl]] = []
    for line, text in block.entries():
        key, _, value = unquote(text).partition("=")
        if key.strip() and value.strip():
            found.append((line.number, Sysctl(key=key.strip(), value=value.strip())))
    for line in block.children():
        value = unquote(line.value or "")
        if value:
            found.append((line.number, Sysctl(key=line.key or "", value=value)))
    return [sysctl for _, sysctl in sorted(found, key=lambda pair: pair[0])]


def parse_service(service: Block) -> ServiceConfig:
    """Build a ``ServiceConfig`` from one service block."""
    return ServiceConfig(
        name=service.name,
        image=_scalar(service, "image"),
        command=_parse_command(service),
        restart=_scalar(service, "restart"),
        ports=_parse_ports(service),
        environment=_parse_environment(service),
        volumes=_parse_volumes(service),
        networks=_parse_service_networks(service),
        depends_on=_parse_depends_on(service),
        sysctls=_parse_sysctls(service),
        cap_add=[unquote(text) for _, text in _list_entries(service, "cap_add") if text],
    )


def parse_network(network: Block) -> NetworkConfig:
    external = network.child("external")
    driver = network.child("driver")
    return NetworkConfig(
        name=network.name,
        external=external is not None and external.value.lower() == "true",
        driver=(unquote(driver.value) or None) if driver is not None else None,
    )


def parse_compose(text: str) -> ParsedComposeData:
    """Parse a Compose document into services, networks and volume names."""
    lines = classify_document(text)
    return ParsedComposeData(
        services=[parse_service(block) for block in service_blocks(lines)],
        networks=[parse_network(block) for block in network_blocks(lines)],
        volumes=[block.name for block in volume_blocks(lines)],
    )
