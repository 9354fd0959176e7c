"""
Relay module bridge

Connects the switch paths of a data bus to Devantech-style relay modules.

- Conduit: abstraction of a bi-directional byte channel. SocketConduit and SerialConduit.
- Connector: opens a conduit to an endpoint and fires connected/disconnected events.
- ConnectionReader: opens a connector and reads it on a background thread, posting events.
- Codec: the wire format of a module. TcpAsciiCodec writes configured commands and recognises
  the "fail" response. SerialBitmaskCodec writes commands followed by a status poll, and decodes
  the status byte into one state per channel.
- Transport: one module's connector, codec and connection state. Chosen from the connection
  string scheme: tcp, usb, or http/https (accepted, never connected).
- ChannelRegistry: the channels of the valid modules and the bus paths derived from their keys.
- StateBridge: subscribes each channel to its trigger stream, writes toggles to the module and
  publishes channel state. Events from streams and connections are queued and handled by a single
  dispatching thread.
- Plugin: the host lifecycle around a StateBridge.


## Threading

Opening a socket or serial port and reading from it are blocking operations, so each connection
has a background reader thread. Reader threads never change bridge state; they post events to
the bridge queue. Stream values are posted to the same queue. The dispatching thread (the
plugin's dispatcher loop, or the caller of StateBridge.run()) drains the queue and does all
encoding, writing and publishing.

Writes are not acknowledged. There is no reconnection: a connection that closes stays closed
until the bridge is stopped and started again.
"""
