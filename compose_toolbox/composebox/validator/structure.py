"""Docker Compose structure checks: sections, services, images, ports."""

from __future__ import annotations

import re

from composebox.analyzer.lines import LineRole, SourceLine, is_mapping_entry, unquote
from composebox.analyzer.sections import (
    Block,
    block_at,
    locate_section,
    service_blocks,
)
from composebox.validator.models import DiagnosticCode, ValidationIssue, make_issue
from composebox.validator.volume_mounts import check_volume_mounts

COMMON_PORTS: dict[int, str] = {
    22: "SSH",
    80: "HTTP",
    443: "HTTPS",
    3306: "MySQL",
    5432: "PostgreSQL",
    6379: "Redis",
    27017: "MongoDB",
}

# Keys that only make sense in a network/volume *definition*, never in a
# per-service list of attachments or mounts
NETWORK_DEFINITION_KEYS = {"driver", "driver_opts", "external", "ipam", "attachable"}
VOLUME_DEFINITION_KEYS = {"driver", "driver_opts", "external", "labels"}

# [ip:]host:container[/protocol]
PORT_RE = re.compile(
    r"^(?:(?P<ip>[\d.]+|\[[0-9A-Fa-f:]+\]):)?(?P<host>\d+):(?P<container>\d+)"
    r"(?:/(?P<protocol>tcp|udp|sctp))?$"
)

MAX_INLINE_ENV_VARS = 5


def _is_indented(line: SourceLine) -> bool:
    return line.raw[:1] in (" ", "\t")


def _defines_any(block: Block, keys: set[str]) -> bool:
    for line in block.content():
        if line.role is LineRole.mapping_key and line.key in keys:
            return True
        if (
            line.role is LineRole.list_item
            and is_mapping_entry(line.item)
            and line.item.split(":", 1)[0] in keys
        ):
            return True
    return False


def check_section_placement(lines: list[SourceLine]) -> list[ValidationIssue]:
    """Flag section keys that ended up indented below another key.

    ``services:`` is never valid below the top level. Indented ``networks:``
    and ``volumes:`` are legal per service, so they are only flagged when
    their block holds definition keys such as ``driver:``.
    """
    issues: list[ValidationIssue] = []
    for index, line in enumerate(lines):
        if (
            line.role is not LineRole.mapping_key
            or line.in_block_scalar
            or line.value
            or not _is_indented(line)
        ):
            continue

        if line.key == "services":
            issues.append(make_issue(DiagnosticCode.compose_misplaced_services, line.number))
            continue

        if line.key == "networks":
            code, keys = DiagnosticCode.compose_misplaced_networks, NETWORK_DEFINITION_KEYS
        elif line.key == "volumes":
            code, keys = DiagnosticCode.compose_misplaced_volumes, VOLUME_DEFINITION_KEYS
        else:
            continue

        block = block_at(lines, index, len(lines))
        if _defines_any(block, keys):
            end = block.body[-1].number if block.body else line.number
            issues.append(make_issue(code, line.number, end_line=end))
    return issues


def _check_image(service: str, image: Block) -> list[ValidationIssue]:
    value = unquote(image.value)
    line = image.header.number
    if value == "":
        return [make_issue(DiagnosticCode.service_empty_image, line, service=service)]
    if value.endswith(":"):
        return [make_issue(DiagnosticCode.service_invalid_image_format, line, service=service)]
    if "::" in value:
        return [make_issue(DiagnosticCode.service_double_colon_image, line, service=service)]
    return []


def parse_port(text: str) -> tuple[int, str] | None:
    """Host port and protocol of a short-syntax port entry, if it has one."""
    match = PORT_RE.match(text.replace('"', "").replace("'", "").strip())
    if not match:
        return None
    return int(match.group("host")), match.group("protocol") or "tcp"


def _check_ports(service: str, ports: Block) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    used: set[tuple[int, str]] = set()

    for line, text in ports.entries():
        parsed = parse_port(text)
        if parsed is None:
            continue
        port, _ = parsed
        if parsed in used:
            issues.append(
                make_issue(DiagnosticCode.service_duplicate_port, line.number, service=service, port=port)
            )
        used.add(parsed)

        if port in COMMON_PORTS:
            issues.append(
                make_issue(
                    DiagnosticCode.service_common_port,
                    line.number,
                    service=service,
                    port=port,
                    protocol=COMMON_PORTS[port],
                )
            )
    return issues


def check_service(service: Block) -> list[ValidationIssue]:
    """Run every per-service check on one service block."""
    issues: list[ValidationIssue] = []
    name = service.name
    start = service.header.number

    image = service.child("image")
    if image is None and not service.has_child("build"):
        issues.append(make_issue(DiagnosticCode.service_missing_image_build, start, service=name))
    if image is not None:
        issues.extend(_check_image(name, image))

    if not service.has_child("restart"):
        issues.append(make_issue(DiagnosticCode.service_missing_restart, start, service=name))

    volumes = service.child("volumes")
    if volumes is None:
        issues.append(make_issue(DiagnosticCode.service_missing_volumes, start, service=name))
    else:
        issues.extend(check_volume_mounts(volumes))

    expose = service.child("expose")
    if expose is not None and not service.has_child("ports"):
        issues.append(
            make_issue(DiagnosticCode.service_exposed_no_ports, expose.header.number, service=name)
        )

    environment = service.child("environment")
    if environment is not None and not service.has_child("env_file"):
        count = len(environment.entries()) + len(environment.children())
        if count > MAX_INLINE_ENV_VARS:
            issues.append(
                make_issue(
                    DiagnosticCode.service_many_env_vars,
                    environment.header.number,
                    service=name,
                    count=count,
                )
            )

    privileged = service.child("privileged")
    if privileged is not None and unquote(privileged.value).lower() == "true":
        issues.append(
            make_issue(DiagnosticCode.service_privileged_mode, privileged.header.number, service=name)
        )

    network_mode = service.child("network_mode")
    if network_mode is not None and unquote(network_mode.value) == "host":
        issues.append(
            make_issue(DiagnosticCode.service_host_network, network_mode.header.number, service=name)
        )

    ports = service.child("ports")
    if ports is not None:
        issues.extend(_check_ports(name, ports))

    return issues


def check_structure(lines: list[SourceLine]) -> list[ValidationIssue]:
    """Validate the Compose document structure.

    A missing top-level ``services:`` is reported and ends the pass; nothing
    else here is meaningful without it.
    """
    issues = check_section_placement(lines)

    section = locate_section(lines, "services")
    if section is None:
        issues.append(make_issue(DiagnosticCode.compose_missing_services, 1))
        return issues

    services = service_blocks(lines)
    if not services:
        issues.append(make_issue(DiagnosticCode.compose_empty_services, section.line_number))

    for service in services:
        issues.extend(check_service(service))
    return issues
