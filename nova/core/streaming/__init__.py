"""
Streaming relay.

Exports: StreamRelay, RelayStream
"""

from nova.core.streaming.relay import RelayStream, StreamRelay

__all__ = ["RelayStream", "StreamRelay"]
