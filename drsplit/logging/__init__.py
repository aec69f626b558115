from .trace import History, get_logger, logging_callback

__all__ = ["History", "get_logger", "logging_callback"]
