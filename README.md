# peermesh

Components for the bookkeeping side of a peer-to-peer node: which peers are
preferred, how well each peer has behaved, which peers sit on which topic,
which port to listen on, and how outgoing data from several named channels
is handed to a single sender. There are no runtime dependencies.

## Modules

- `peermesh.core`
  - `PeerID`: a `bytes` subclass (a `str` is UTF-8 encoded); `pretty()`
    returns its base58 form.
  - `b58encode(data)` / `b58decode(text)`: base58 with the Bitcoin alphabet;
    `b58decode` raises `ValueError` on a bad character.
  - `Message`: a dataclass with `from_`, `data`, `payload`, `seq_no`, `topic`,
    `signature`, `key`, `peer`, `timestamp` and `broadcast_method`.
  - `BroadcastMethod` (`DIRECT`, `BROADCAST`), `PeerType`, `PeerSubType`,
    `P2PPeerInfo`.
  - `UnknownPeerShardResolver.get_peer_info(pid)`: always an unknown, regular
    peer in shard 0.
  - `P2PError`: the exception the components raise.
  - `ALL_SHARD_ID`: the shard value used for "every shard".
- `peermesh.validator`: `is_valid_ip`, `is_valid_peer_id` (base58 multihash
  starting with `Qm` or `1`) and `is_valid_connection_string` (either one).
- `peermesh.peers_holder.PeersHolder`: built from preferred connection
  addresses, each of which must be a valid IP or peer ID (otherwise
  `P2PError`). `put_connection_address(peer_id, address)` records a peer whose
  address contains a preferred one; `put_shard_id(peer_id, shard)` then files
  it under that shard. `get()`, `contains()`, `remove()` and `clear()` work on
  the peers whose shard is known.
- `peermesh.load_balancer.OutgoingChannelLoadBalancer`: starts with the
  channel `DEFAULT_SEND_CHANNEL`. `add_channel` / `remove_channel` manage named
  channels (the default one can be neither added nor removed);
  `get_channel_or_default(name).put(SendableData(...))` queues data, and
  `collect_one_element_from_channels(timeout=None)` returns the next item, or
  `None` on timeout or after `close()`. Putting on a removed channel raises
  `P2PError`. Usable as a context manager.
- `peermesh.peers_on_channel.PeersOnChannel(fetch_peers_handler,
  refresh_interval, ttl_interval, logger, clock=None)`: caches peers per topic,
  fetching on first request; a background thread refetches topics older than
  `ttl_interval` every `refresh_interval` seconds until `close()`.
- `peermesh.ports`: `get_port(port, handler, logger)` accepts a non-negative
  integer string (returned as is) or a `start-end` range with
  `start >= 1025`; `choose_port` tries the range in random order and returns
  the first port for which `handler` does not raise. `check_free_port(port)`
  raises if a TCP listener cannot be bound on localhost at that port.
- `peermesh.topic_processors.TopicProcessors`: `add_topic_processor`,
  `remove_topic_processor` (both raise `P2PError` on a duplicate or missing
  identifier) and `get_list()`, returning identifiers and processors in
  matching order.
- `peermesh.rating`
  - `MemoryCache`: a thread-safe dict-backed cache with `get`, `put`, `has`,
    `remove` and `keys`.
  - `PeersRatingHandler(top_rated_cache, bad_rated_cache, logger)`: a peer
    seen for the first time enters the top-rated cache at 0;
    `increase_rating` adds 2, `decrease_rating` subtracts 1, clamped to
    -100..100; negative ratings live in the bad-rated cache.
    `get_top_rated_peers_from_list(peers, n)` returns the top-rated peers,
    followed by the bad-rated ones if fewer than `n` are top rated.
  - `PeersRatingMonitor(top_rated_cache, bad_rated_cache)`:
    `get_connected_peers_ratings(handler)` calls `handler.connected_peers()`
    and returns a JSON object mapping each peer's `pretty()` form to its
    rating, or `"unknown"`.

## Example

```python
import logging

from peermesh.core import PeerID
from peermesh.peers_holder import PeersHolder
from peermesh.rating import MemoryCache, PeersRatingHandler

holder = PeersHolder(["10.100.100.100"])
pid = PeerID(b"some peer")
holder.put_connection_address(pid, "/ip4/10.100.100.100/tcp/38191/p2p/some-pid")
holder.put_shard_id(pid, 1)
assert holder.contains(pid)
print(holder.get())  # {1: [PeerID(...)]}

ratings = PeersRatingHandler(MemoryCache(), MemoryCache(), logging.getLogger("ratings"))
ratings.increase_rating(pid)
print(ratings.get_top_rated_peers_from_list([pid], 1))
```

## What it does not do

The package opens no peer connections: there is no transport, no
publish/subscribe layer, no peer discovery, and no signing or serialisation
of messages. It provides no command-line program. The components expect the
surrounding node to supply connected peers, fetch handlers and loggers.

## Running the tests

```
pip install "peermesh[test]"
pytest
```