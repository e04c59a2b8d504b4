"""Persistence sinks for status and telemetry rows."""

from pylightbug.sink.base import PersistenceSink
from pylightbug.sink.memory import MemorySink
from pylightbug.sink.supabase import SupabaseSink, build_supabase_transport

__all__ = ["MemorySink", "PersistenceSink", "SupabaseSink", "build_supabase_transport"]
