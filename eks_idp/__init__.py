"""EKS Identity Provider Reconciler.

Plans and applies the OIDC identity provider association of an Amazon EKS
cluster: compares the observed association with the desired one and emits
the ordered, idempotent procedures that converge them.
"""

try:
    from importlib.metadata import version

    __version__ = version("eks-idp-reconciler")
except Exception:
    __version__ = "0.0.0.dev0"

__all__ = ["__version__"]
