from portwatch.console.reporter import ConsoleReporter

__all__ = ["ConsoleReporter"]
