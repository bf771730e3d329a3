"""
routesim - simulated IP router engines.

Two independent routers share one data model (IPv4 prefix, interface, metric):

- **ForwardingRouter**: longest-prefix-match forwarding over a binary prefix
  trie.
- **DistanceVectorRouter**: RIP-style route learning with per-neighbor
  metrics, lowest-interface tie-break and change-triggered advertisements.

## Quick Start

```python
from routesim import DistanceVectorRouter, ForwardingRouter, RouterConfig

config = RouterConfig(num_nics=4)
with ForwardingRouter(config) as router:
    router.set_forwarding_rule(0x0A000000, 8, 0)
    router.forward(0x0A000505, packet_id=1).format()  # "O 1 0"
```
"""

from .core import (
    Advertisement,
    DistanceVectorRouter,
    ForwardingDecision,
    ForwardingRouter,
    RouterConfig,
)
from .datastructures import NO_INTERFACE, Prefix, PrefixTrie
from .errors import RoutingError

__version__ = "0.1.0"

__all__ = [
    "Advertisement",
    "DistanceVectorRouter",
    "ForwardingDecision",
    "ForwardingRouter",
    "RouterConfig",
    "NO_INTERFACE",
    "Prefix",
    "PrefixTrie",
    "RoutingError",
]
