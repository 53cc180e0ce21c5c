"""The CoreMark processor benchmark: list, matrix and state-machine workloads validated by CRC."""

__version__ = "1.0.0"

__all__ = ["crc", "state", "matrix", "listbench", "formatting", "timer", "runner"]