"""HTTP proxy normalizing Minecraft server status queries."""

__version__ = "0.1.0"
