"""
Garden Telemetry Modules

- garden: Environment simulator, tick scheduler, metrics snapshot API
"""
