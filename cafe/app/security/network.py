"""Network based admission: only callers on the café Wi-Fi may order."""

from __future__ import annotations

import logging
from ipaddress import IPv4Address, IPv6Address, ip_address, ip_network
from typing import Mapping

from .admission import AdmissionDecision, AdmissionRequest

logger = logging.getLogger("cafe.admission")

NETWORK_REJECTED = "network not authorized"


def client_ip(headers: Mapping[str, str], peer: str | None) -> str | None:
    """Return the originating client IP.

    The first ``X-Forwarded-For`` entry wins when present, otherwise the
    socket peer address is used.
    """

    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return peer


def _parse_ip(raw: str | None) -> IPv4Address | IPv6Address | None:
    if not raw:
        return None
    try:
        addr = ip_address(raw.strip())
    except ValueError:
        return None
    if isinstance(addr, IPv6Address) and addr.ipv4_mapped is not None:
        return addr.ipv4_mapped
    return addr


class SubnetStrategy:
    """Admit callers whose private IP lies within ``subnet``."""

    name = "subnet"

    def __init__(self, subnet: str) -> None:
        self.network = ip_network(subnet, strict=False)

    async def evaluate(self, request: AdmissionRequest) -> AdmissionDecision:
        addr = _parse_ip(request.client_ip)
        if addr is None:
            logger.warning("unresolvable client ip", extra={"client_ip": request.client_ip})
            return AdmissionDecision(False, NETWORK_REJECTED)
        if not addr.is_private:
            logger.warning("client ip is not private", extra={"client_ip": str(addr)})
            return AdmissionDecision(False, NETWORK_REJECTED)
        if addr.version != self.network.version or addr not in self.network:
            logger.warning(
                "client ip outside %s", self.network, extra={"client_ip": str(addr)}
            )
            return AdmissionDecision(False, NETWORK_REJECTED)
        return AdmissionDecision(True, "on cafe network")
