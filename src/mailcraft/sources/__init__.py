from .producers import Producer, Sink, StreamProducer, bytes_producer, collect, file_producer, text_producer

__all__ = [
    "Producer",
    "Sink",
    "StreamProducer",
    "bytes_producer",
    "collect",
    "file_producer",
    "text_producer",
]
