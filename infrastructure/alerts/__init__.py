"""
Alert sinks for the rest-countdown alert.
"""

from infrastructure.alerts.logging_sink import LoggingAlertSink, RecordedAlert

__all__ = ["LoggingAlertSink", "RecordedAlert"]
