"""Selector health monitoring and alerting."""

from skyscrape.core.monitoring.alerts import (
    ALERT_SUBJECT,
    AlertSink,
    EmailAlertSink,
    LoggingAlertSink,
    create_alert_sink,
)
from skyscrape.core.monitoring.monitor import SelectorHealthMonitor

__all__ = [
    'ALERT_SUBJECT',
    'AlertSink',
    'EmailAlertSink',
    'LoggingAlertSink',
    'SelectorHealthMonitor',
    'create_alert_sink',
]
