"""Scan core -- seen-set, scan orchestrator and the monitor state machine."""

from sniper.monitor.controller import MonitorController
from sniper.monitor.orchestrator import ScanOrchestrator
from sniper.monitor.seen_store import SeenStore

__all__ = ["MonitorController", "ScanOrchestrator", "SeenStore"]
