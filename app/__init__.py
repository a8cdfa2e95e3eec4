"""Payment token service: registry of service methods and token issuance."""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("payment-token-service")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"
