"""
openHAB bridge for conversational agents.

Polls an openHAB server, publishes a device snapshot as agent instructions and
exposes bulk switch/shutter actions.
"""

__version__ = "1.0.0"
