from __future__ import annotations


class PortScanError(ValueError):
    """Base class for input errors that abort a scan before it starts."""


class InvalidArgument(PortScanError):
    pass


class InvalidPortRange(PortScanError):
    pass


class MissingArgument(PortScanError):
    pass


class NoTargets(PortScanError):
    pass


class EmptyPortSet(PortScanError):
    pass
