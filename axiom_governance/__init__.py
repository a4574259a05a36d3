"""
axiom_governance package bootstrap.

Groups the policy evaluation engine (`axiom_governance.policy`) and the
banking compliance validators (`axiom_governance.compliance`) that audit
what autonomous agents decided or said.
"""

from importlib import metadata


def get_version() -> str:
    """Return the package version if installed, else '0.0.0'."""
    try:
        return metadata.version("axiom-governance")
    except metadata.PackageNotFoundError:  # source checkout
        return "0.0.0"


__all__ = ["get_version"]
