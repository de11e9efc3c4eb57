"""Infrastructure modules for the notification dispatcher.

Centralized infrastructure components:
- configuration: Settings management (get_settings, Settings)
- logging: Structured logging setup and dispatch context
- operations: Operation results and error classification
"""
