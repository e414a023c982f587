"""Heartbeat aggregation backend for an hourly uptime status page."""
