"""Client login state and handling of the server's login response."""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass

from .utils import get_net_ifname, get_net_mac

__all__ = ["VERSION", "PROTOCOL_VERSION", "Login", "LoginResponse", "init_login"]

VERSION = "1.0.1"
PROTOCOL_VERSION = "0.10.0"

_ROUTER_IFNAME = "br-lan"

log = logging.getLogger(__name__)


@dataclass
class LoginResponse:
    """The fields of a login response sent by the server."""

    version: str | None = None
    run_id: str | None = None
    error: str | None = None


@dataclass
class Login:
    """What the client tells the server when it logs in."""

    version: str = PROTOCOL_VERSION
    hostname: str | None = None
    os: str = ""
    arch: str = ""
    user: str | None = None
    privilege_key: str | None = None
    timestamp: int = 0
    run_id: str | None = None
    pool_count: int = 1
    logged: bool = False
    is_router: bool = False

    def check_response(self, response: LoginResponse) -> bool:
        """Record the outcome of a login response and return whether it succeeded."""
        if response.run_id is None or len(response.run_id) <= 1:
            if response.error:
                log.error("login response error: %s", response.error)
            log.error("login failed!")
            self.logged = False
        else:
            self.logged = True
            log.debug(
                "login response: run_id: [%s], version: [%s]",
                response.run_id,
                response.version,
            )
            self.run_id = response.run_id
        return self.logged


def init_login(user: str | None = None) -> Login:
    """Build the login state for this host.

    The run id is the hardware address of the identifying interface. Raises
    OSError when no interface or address can be found.
    """
    uname = platform.uname()
    ifname = get_net_ifname()
    is_router = ifname == _ROUTER_IFNAME
    if is_router:
        log.debug("working in router")
    run_id = get_net_mac(ifname)
    return Login(
        version=PROTOCOL_VERSION,
        os=uname.system,
        arch=uname.machine,
        user=user,
        run_id=run_id,
        is_router=is_router,
    )