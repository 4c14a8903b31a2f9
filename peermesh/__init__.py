"""Peer tracking, rating, port selection and outgoing-channel components for peer-to-peer nodes."""

__version__ = "0.1.0"

__all__ = [
    "core",
    "validator",
    "peers_holder",
    "load_balancer",
    "peers_on_channel",
    "ports",
    "topic_processors",
    "rating",
]