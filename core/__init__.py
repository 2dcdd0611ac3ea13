"""Core functionality for the Hue temperature client.

This package contains:
- config: Settings and the credential store
- discovery: Bridge lookup via the Philips discovery service
- bridge: BridgeClient for the bridge's local API
- pairing: Link button handshake state machine
- poller: Periodic outdoor temperature polling
- connection: Connection health tracking
- scheduler: Cooperative timer queue driving pairing and polling
- widget: WidgetController tying it all together for the CLI
"""
