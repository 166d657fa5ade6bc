from __future__ import annotations

import enum
import logging

from minikube.flags import FlagSet

logger = logging.getLogger("minikube.machine")

USE_VENDORED_DRIVER = "use-vendored-driver"


class ClientType(enum.Enum):
    """How the driver layer is reached."""

    LOCAL = "local"  # drivers compiled into this process
    RPC = "rpc"  # external driver plugins over RPC


def get_client_type(flags: FlagSet) -> ClientType:
    flag = flags.lookup(USE_VENDORED_DRIVER)
    client_type = ClientType.LOCAL if flag is not None and flag.value else ClientType.RPC
    logger.debug("client_type_selected", extra={"client_type": client_type.value})
    return client_type
