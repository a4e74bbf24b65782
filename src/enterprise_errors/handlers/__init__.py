from enterprise_errors.handlers.wrapper import Handler, ReportHook, handle_errors, report_to_request

__all__ = [
    "Handler",
    "ReportHook",
    "handle_errors",
    "report_to_request",
]
