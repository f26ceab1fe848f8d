"""Alert delivery -- sink interface, Telegram transport and message formatting."""

from sniper.alerts.formatter import format_alert
from sniper.alerts.sink import AlertSink, LogAlertSink
from sniper.alerts.telegram import TelegramAlertSink

__all__ = ["AlertSink", "LogAlertSink", "TelegramAlertSink", "format_alert"]
