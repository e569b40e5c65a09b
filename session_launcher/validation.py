"""
Parameter validation: down-level usernames, FQDN shape and host reachability.
"""

import re
import logging
import platform
import subprocess

from .errors import ValidationError

logger = logging.getLogger(__name__)

MAX_FQDN_LENGTH = 255
_LABEL_RE = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?")


def is_down_level_username(username: str) -> bool:
    """Empty is accepted here; anything else needs a domain separator"""
    return not username or "\\" in username


def validate_username(username: str) -> str:
    if not is_down_level_username(username):
        raise ValidationError(
            f"Username '{username}' is not in down-level format (domain\\user)"
        )
    return username


def is_fqdn(host: str) -> bool:
    """Check FQDN shape: 1-255 chars, 1-63 char labels, non-numeric final label"""
    if not host or len(host) > MAX_FQDN_LENGTH:
        return False

    labels = host.split(".")
    if not all(_LABEL_RE.fullmatch(label) for label in labels):
        return False

    return not labels[-1].isdigit()


def ping_command(host: str, count: int = 1) -> list:
    flag = "-n" if platform.system() == "Windows" else "-c"
    return ["ping", flag, str(count), host]


def probe_reachable(host: str, count: int = 1) -> bool:
    """Send ICMP echo requests through the system ping"""
    try:
        result = subprocess.run(
            ping_command(host, count),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.error(f"Reachability probe for {host} could not run: {e}")
        return False

    reachable = result.returncode == 0
    logger.debug(f"Reachability probe for {host}: {reachable}")
    return reachable


def validate_host(host: str, probe) -> str:
    """Check the shape first, then probe exactly once"""
    if not is_fqdn(host):
        raise ValidationError(f"Host '{host}' is not a valid FQDN")

    if not probe(host):
        raise ValidationError(f"Host '{host}' did not answer the reachability probe")

    return host
