from modeleval.callbacks.logger import BufferLogger, Logger, LoggingLogger, StreamLogger, message_text

__all__ = ["Logger", "LoggingLogger", "BufferLogger", "StreamLogger", "message_text"]
