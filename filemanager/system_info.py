# filemanager/system_info.py
import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import psutil

CPUINFO_PATH = Path("/proc/cpuinfo")


@dataclass
class CpuInfo:
    model: str
    speed_ghz: Optional[float]

    @property
    def speed_label(self) -> str:
        if self.speed_ghz is None:
            return "unknown"
        return f"{self.speed_ghz:g} GHz"


def default_eol() -> str:
    return os.linesep


def architecture() -> str:
    return platform.machine() or "unknown"


def home_dir() -> Path:
    return Path.home()


def _cpu_models(count: int) -> List[str]:
    models: List[str] = []
    try:
        for line in CPUINFO_PATH.read_text(encoding="utf-8", errors="ignore").splitlines():
            key, _, value = line.partition(":")
            if key.strip() in ("model name", "Model"):
                models.append(value.strip())
    except OSError:
        pass
    fallback = platform.processor() or platform.machine() or "unknown"
    while len(models) < count:
        models.append(models[-1] if models else fallback)
    return models[:count]


def cpu_info() -> List[CpuInfo]:
    """Gathers one entry per logical CPU, speed in GHz when the platform reports it."""
    count = psutil.cpu_count(logical=True) or os.cpu_count() or 1
    try:
        freqs = psutil.cpu_freq(percpu=True) or []
    except (NotImplementedError, OSError):
        freqs = []
    models = _cpu_models(count)
    infos = []
    for idx in range(count):
        freq = freqs[idx] if idx < len(freqs) else (freqs[0] if freqs else None)
        speed = round(freq.current / 1000.0, 2) if freq and freq.current else None
        infos.append(CpuInfo(model=models[idx], speed_ghz=speed))
    return infos
