"""SQLAlchemy ORM models."""

# Import all models so Base.metadata registers them for create_all().
from uptime_server.models.heartbeat import Heartbeat as Heartbeat
from uptime_server.models.status import StatusSnapshot as StatusSnapshot
