"""Exponential moving average."""

from __future__ import annotations


class EMACalculator:
    """Exponential moving average seeded with the first value it receives."""

    def __init__(self, smoothing_factor: float = 0.2) -> None:
        if smoothing_factor <= 0.0 or smoothing_factor > 1.0:
            raise ValueError("Smoothing factor must be between 0 and 1")
        self._alpha = smoothing_factor
        self._current = 0.0
        self._initialized = False

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def current_ema(self) -> float:
        return self._current

    @property
    def initialized(self) -> bool:
        return self._initialized

    def update(self, new_value: float) -> float:
        """Fold a new value into the average and return the updated average."""
        if not self._initialized:
            self._current = new_value
            self._initialized = True
        else:
            self._current = new_value * self._alpha + self._current * (1.0 - self._alpha)
        return self._current

    def reset(self) -> None:
        """Forget all values seen so far."""
        self._initialized = False
        self._current = 0.0