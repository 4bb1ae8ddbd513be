import json
import sys
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"


class Colors:
    """ANSI color codes for console output"""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    WHITE = '\033[37m'
    BRIGHT_BLACK = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_CYAN = '\033[96m'


LEVEL_STYLES = {
    LogLevel.DEBUG: (Colors.BRIGHT_CYAN, "🔍"),
    LogLevel.INFO: (Colors.BRIGHT_BLUE, "ℹ️"),
    LogLevel.WARNING: (Colors.BRIGHT_YELLOW, "⚠️"),
    LogLevel.ERROR: (Colors.BRIGHT_RED, "❌"),
    LogLevel.SUCCESS: (Colors.BRIGHT_GREEN, "✅"),
}

MAX_EXTRA_LENGTH = 100


class ZenithLogger:
    """Service logger for the Zenith backend with colorized single-line output.

    Records look like::

        [12:00:00.000] ✅ [POST/CREATE] [SUCCESS] Post created | post_id=7, author=alice
    """

    def __init__(self, service_name: str = "ZENITH", enable_colors: bool = True, stream=None):
        self.service_name = service_name.upper()
        self.enable_colors = enable_colors
        self.stream = stream

    def _colorize(self, text: str, color: str) -> str:
        if not self.enable_colors:
            return text
        return f"{color}{text}{Colors.RESET}"

    def _prefix(self, context: Optional[str], emoji: str = "") -> str:
        """Timestamp and service/context tags shared by every line."""
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        service_context = self.service_name
        if context:
            service_context += f"/{context.upper()}"
        timestamp_text = self._colorize(f"[{timestamp}]", Colors.DIM)
        service_text = self._colorize(f"[{service_context}]", Colors.BRIGHT_BLACK)
        marker = f"{emoji} " if emoji else ""
        return f"{timestamp_text} {marker}{service_text}"

    @staticmethod
    def _format_extra(value: Any) -> str:
        if isinstance(value, (dict, list)):
            value_str = json.dumps(value, default=str, separators=(',', ':'))
        else:
            value_str = str(value)
        if len(value_str) > MAX_EXTRA_LENGTH:
            value_str = value_str[:MAX_EXTRA_LENGTH] + "..."
        return value_str

    def _write(self, line: str):
        stream = self.stream or sys.stdout
        print(line, file=stream)
        stream.flush()

    def format(self, level: LogLevel, message: str, context: Optional[str] = None, **kwargs) -> str:
        color, emoji = LEVEL_STYLES.get(level, (Colors.WHITE, ""))
        prefix = self._prefix(context, emoji)
        level_text = self._colorize(f"[{level.value}]", color + Colors.BOLD)
        line = f"{prefix} {level_text} {message}"

        if kwargs:
            extras = ", ".join(f"{key}={self._format_extra(value)}" for key, value in kwargs.items())
            line += self._colorize(f" | {extras}", Colors.DIM)
        return line

    def log(self, level: LogLevel, message: str, context: Optional[str] = None, **kwargs):
        self._write(self.format(level, message, context, **kwargs))

    def debug(self, message: str, context: Optional[str] = None, **kwargs):
        self.log(LogLevel.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[str] = None, **kwargs):
        self.log(LogLevel.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[str] = None, **kwargs):
        self.log(LogLevel.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[str] = None, **kwargs):
        self.log(LogLevel.ERROR, message, context, **kwargs)

    def success(self, message: str, context: Optional[str] = None, **kwargs):
        self.log(LogLevel.SUCCESS, message, context, **kwargs)

    def separator(self, char: str = "─", length: int = 60, context: Optional[str] = None):
        prefix = self._prefix(context)
        self._write(f"{prefix} {self._colorize(char * length, Colors.DIM)}")

    def banner(self, message: str, context: Optional[str] = None, char: str = "═", width: int = 60):
        """Print a message centered in a line of ``char``."""
        content = f" {message} "
        if len(content) < width - 4:
            padding = (width - len(content)) // 2
            content = char * padding + content + char * (width - len(content) - padding)

        prefix = self._prefix(context)
        self._write(f"{prefix} {self._colorize(content, Colors.BRIGHT_CYAN + Colors.BOLD)}")

    def section_start(self, section_name: str, context: Optional[str] = None):
        self.banner(f"{section_name.upper()} STARTED", context, "═", 50)

    def section_end(self, section_name: str, context: Optional[str] = None, success: bool = True):
        status_text = "COMPLETED" if success else "FAILED"
        self.banner(f"{section_name.upper()} {status_text}", context, "═", 50)
        self.separator("─", 60, context)


# Global logger instances for different services
auth_logger = ZenithLogger("AUTH")
user_logger = ZenithLogger("USER")
post_logger = ZenithLogger("POST")
comment_logger = ZenithLogger("COMMENT")
taxonomy_logger = ZenithLogger("TAXONOMY")
cleanup_logger = ZenithLogger("CLEANUP")
db_logger = ZenithLogger("DATABASE")
api_logger = ZenithLogger("API")


def get_logger(service_name: str) -> ZenithLogger:
    """Get a logger instance for a specific service"""
    return ZenithLogger(service_name)
