"""
Process-wide engine settings.

The active configuration is resolved once, when :pymod:`koblitz` is first
imported, from the environment (``KOBLITZ_*`` variables) or the defaults
below.  Changing ``base_window`` afterwards goes through
:func:`koblitz.keys.precompute`, which rebuilds the generator table.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .precompute import MAX_WINDOW


@dataclass(frozen=True)
class EngineConfig:
    """
    Tunables for the curve engine.

    Args:
        base_window:        wNAF window width for the generator point (must
                            divide 256, at most 16)
        max_nonce_attempts: RFC6979 DRBG generations before giving up
        max_key_attempts:   rejection-sampling rounds in ``random_private_key``
    """

    base_window: int = 8
    max_nonce_attempts: int = 1000
    max_key_attempts: int = 8

    def __post_init__(self) -> None:
        if not 1 <= self.base_window <= MAX_WINDOW or 256 % self.base_window:
            raise ValueError(
                f"base_window must divide 256 and be at most {MAX_WINDOW}, "
                f"got {self.base_window}"
            )
        if self.max_nonce_attempts < 1:
            raise ValueError("max_nonce_attempts must be ≥ 1")
        if self.max_key_attempts < 1:
            raise ValueError("max_key_attempts must be ≥ 1")

    @classmethod
    def from_env(cls, environ=None) -> EngineConfig:
        """Build a config from ``KOBLITZ_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            base_window=int(env.get("KOBLITZ_BASE_WINDOW", defaults.base_window)),
            max_nonce_attempts=int(
                env.get("KOBLITZ_MAX_NONCE_ATTEMPTS", defaults.max_nonce_attempts)
            ),
            max_key_attempts=int(
                env.get("KOBLITZ_MAX_KEY_ATTEMPTS", defaults.max_key_attempts)
            ),
        )


_config = EngineConfig.from_env()


def get_config() -> EngineConfig:
    return _config


def set_config(config: EngineConfig) -> None:
    """Replace the active configuration (does not rebuild existing tables)."""
    global _config
    _config = config
