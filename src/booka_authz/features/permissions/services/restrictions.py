"""Contextual restriction checks for client IP allow-lists."""

import ipaddress
import logging
from typing import Iterable, Optional, Union

logger = logging.getLogger(__name__)

IpAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IpNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def _parse_address(value: Optional[str]) -> Optional[IpAddress]:
    if not value:
        return None
    try:
        address = ipaddress.ip_address(value.strip())
    except ValueError:
        return None
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def _parse_network(entry: str) -> IpNetwork:
    network = ipaddress.ip_network(entry.strip(), strict=False)
    if isinstance(network, ipaddress.IPv6Network) and network.prefixlen >= 96:
        mapped = network.network_address.ipv4_mapped
        if mapped is not None:
            return ipaddress.ip_network(f"{mapped}/{network.prefixlen - 96}", strict=False)
    return network


def ip_allowed(ip_address: Optional[str], allowed_ips: Iterable[str]) -> bool:
    """Whether ``ip_address`` matches an allow-list entry.

    Entries may be single addresses or CIDR networks of either family;
    IPv4-mapped IPv6 entries match the plain IPv4 address.
    A missing or unparseable client address never matches.
    """
    address = _parse_address(ip_address)
    if address is None:
        return False

    for entry in allowed_ips:
        try:
            network = _parse_network(entry)
        except (ValueError, AttributeError):
            logger.warning(f"Skipping malformed IP allow-list entry: {entry!r}")
            continue
        if address.version == network.version and address in network:
            return True
    return False
