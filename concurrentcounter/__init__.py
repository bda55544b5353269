"""Thread-safe integer counters with value-triggered callbacks: IntMutex and IntChan."""

__version__ = "0.1.0"
__all__ = ["counter", "int_mutex", "int_chan"]