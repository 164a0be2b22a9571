import logging
import sys
import json
import os
import gzip
import shutil
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from typing import Optional
from rebalancer_config import LoggingConfig
from rebalancer_cli.context import RunInfo, get_current_run

_STANDARD_RECORD_KEYS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename', 'module',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'taskName', 'getMessage', 'exc_info', 'exc_text',
    'stack_info', 'message', 'run_id', 'portfolio',
}


class CompressingTimedRotatingFileHandler(TimedRotatingFileHandler):
    """TimedRotatingFileHandler that compresses rotated files"""

    def doRollover(self):
        """Override to add compression after rotation"""
        super().doRollover()

        # Rotated files carry a timestamp suffix after the base name
        dir_name, base_name = os.path.split(self.baseFilename)

        try:
            for file_name in os.listdir(dir_name):
                if file_name.startswith(base_name) and not file_name.endswith('.gz') and file_name != base_name:
                    full_path = os.path.join(dir_name, file_name)
                    with open(full_path, 'rb') as f_in:
                        with gzip.open(f'{full_path}.gz', 'wb') as f_out:
                            shutil.copyfileobj(f_in, f_out)
                    os.remove(full_path)
        except OSError as e:
            # Log compression errors but don't fail the rollover
            print(f"Error during log compression: {e}", file=sys.stderr)


class StructuredFormatter(logging.Formatter):
    """Formatter producing text or JSON lines with run_id/portfolio support"""

    def __init__(self, output_format: str = 'text'):
        super().__init__()
        self.output_format = output_format

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        if getattr(record, 'run_id', None):
            log_data['run_id'] = record.run_id

        if getattr(record, 'portfolio', None):
            log_data['portfolio'] = record.portfolio

        # Any other extra fields
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_KEYS:
                if isinstance(value, datetime):
                    log_data[key] = value.strftime('%Y-%m-%d %H:%M:%S')
                else:
                    log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.output_format == 'json':
            return json.dumps(log_data, default=str)

        base_msg = f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"
        if 'run_id' in log_data:
            base_msg += f" [run_id={log_data['run_id']}]"
        if 'portfolio' in log_data:
            base_msg += f" [portfolio={log_data['portfolio']}]"
        if 'exception' in log_data:
            base_msg += f"\n{log_data['exception']}"
        return base_msg


def setup_logger(name: str) -> logging.Logger:
    # Handlers live on the root logger; named loggers just propagate
    return logging.getLogger(name)


def configure_root_logger(logging_config: LoggingConfig, level_override: Optional[str] = None):
    """Configure the root logger to use structured formatting for all logs"""
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    level = (level_override or logging_config.level).upper()
    root_logger.setLevel(getattr(logging, level))

    formatter = StructuredFormatter(logging_config.format)

    # Log to stderr so command output on stdout stays clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if logging_config.file_path:
        log_dir = os.path.dirname(logging_config.file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = CompressingTimedRotatingFileHandler(
            filename=logging_config.file_path,
            when='midnight',
            interval=1,
            backupCount=30,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def _extract_run_properties(run: Optional[RunInfo]):
    """Extract run properties for the log record's extra dict"""
    if run is None:
        run = get_current_run()

    if run is None:
        return {}

    properties = {'run_id': run.run_id, 'command': run.command}
    if run.portfolio:
        properties['portfolio'] = run.portfolio
    return properties


class AppLogger:
    """Logger wrapper that attaches the current run context to every record"""

    def __init__(self, name: str):
        self.logger = setup_logger(name)

    def log_debug(self, message: str):
        self.logger.debug(message, extra=_extract_run_properties(None))

    def log_info(self, message: str):
        self.logger.info(message, extra=_extract_run_properties(None))

    def log_warning(self, message: str):
        self.logger.warning(message, extra=_extract_run_properties(None))

    def log_error(self, message: str):
        self.logger.error(message, extra=_extract_run_properties(None))
