"""
Centralized logging module for ChargeRoute
Provides easy on/off switching and consistent logging across all modules
"""

import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict


class ChargeRouteLogger:
    """
    Centralized logger for ChargeRoute
    Provides easy switching between different logging levels and outputs
    """

    def __init__(self,
                 log_level: str = "INFO",
                 enable_console: bool = True,
                 enable_file: bool = False,
                 log_dir: str = "debug_logs",
                 log_format: str = "simple"):
        """
        Initialize the logger

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            enable_console: Whether to log to console
            enable_file: Whether to log to files
            log_dir: Directory for log files
            log_format: Log format style ("simple", "detailed", "minimal")
        """
        self.log_level = getattr(logging, log_level.upper())
        self.enable_console = enable_console
        self.enable_file = enable_file
        self.log_dir = log_dir
        self.log_format = log_format

        if self.enable_file:
            os.makedirs(self.log_dir, exist_ok=True)

        self._setup_loggers()

    def _setup_loggers(self):
        """Setup all loggers with proper configuration"""

        self.logger = logging.getLogger('chargeroute')
        self.logger.setLevel(self.log_level)

        # Clear any existing handlers
        self.logger.handlers.clear()

        if self.log_format == "detailed":
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
            )
        elif self.log_format == "simple":
            formatter = logging.Formatter(
                '%(levelname)s - %(message)s'
            )
        else:  # minimal
            formatter = logging.Formatter('%(message)s')

        # stderr keeps stdout clean for JSON output
        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(self.log_level)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if self.enable_file:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_file = os.path.join(self.log_dir, f'chargeroute_{timestamp}.log')

            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

            self.log_file = log_file
        else:
            self.log_file = None

    def get_logger(self, name: str = None) -> logging.Logger:
        """Get a logger instance for a specific module"""
        if name:
            return logging.getLogger(f'chargeroute.{name}')
        return self.logger

    def debug(self, message: str, module: str = None):
        self.get_logger(module).debug(message)

    def info(self, message: str, module: str = None):
        self.get_logger(module).info(message)

    def warning(self, message: str, module: str = None):
        self.get_logger(module).warning(message)

    def error(self, message: str, module: str = None):
        self.get_logger(module).error(message)

    def print_summary(self, title: str, data: Dict[str, Any]):
        """Print a formatted summary"""
        if not self.enable_console:
            return

        lines = [f"\n{'='*50}", title, f"{'='*50}"]
        for key, value in data.items():
            if isinstance(value, (int, float)) and value >= 1000:
                lines.append(f"  {key}: {value:,}")
            else:
                lines.append(f"  {key}: {value}")
        lines.append(f"{'='*50}")
        print("\n".join(lines), file=sys.stderr)

    def log_route_failure(self, start, destination, kind: str, reason: str):
        """Log route computation failures to a dedicated file"""
        if not self.enable_file:
            return

        failure_log_file = os.path.join(self.log_dir, "route_failures.log")

        with open(failure_log_file, 'a', encoding='utf-8') as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"ROUTE FAILURE: {datetime.now().isoformat()}\n")
            f.write(f"Kind: {kind}\n")
            f.write(f"Reason: {reason}\n")
            f.write(f"Start node: {start}\n")
            f.write(f"Destination node: {destination}\n")
            f.write(f"{'='*60}\n")


# Global logger instance
_global_logger = None


def get_logger(name: str = None) -> logging.Logger:
    """Get the global logger instance"""
    return get_global_logger().get_logger(name)


def setup_logger(**kwargs) -> ChargeRouteLogger:
    """Setup the global logger with custom configuration"""
    global _global_logger
    _global_logger = ChargeRouteLogger(**kwargs)
    return _global_logger


def get_global_logger() -> ChargeRouteLogger:
    global _global_logger
    if _global_logger is None:
        _global_logger = ChargeRouteLogger()
    return _global_logger


# Convenience functions
def debug(message: str, module: str = None):
    get_global_logger().debug(message, module)


def info(message: str, module: str = None):
    get_global_logger().info(message, module)


def warning(message: str, module: str = None):
    get_global_logger().warning(message, module)


def error(message: str, module: str = None):
    get_global_logger().error(message, module)


def print_summary(title: str, data: Dict[str, Any]):
    get_global_logger().print_summary(title, data)


def log_route_failure(start, destination, kind: str, reason: str):
    get_global_logger().log_route_failure(start, destination, kind, reason)
