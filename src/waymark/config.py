"""Route table configuration.

RouterConfig is a frozen dataclass — immutable after creation, shared by
every table built from it.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Route table configuration. Immutable after creation.

    Override what you need::

        config = RouterConfig(prefix="/app/", case_insensitive=True)
        table = RouteTable.from_config({"photos/+photoIds&": "photos"}, config)
    """

    # Prepended to every pattern before compilation
    prefix: str = ""

    # Compile matchers with re.IGNORECASE
    case_insensitive: bool = False
