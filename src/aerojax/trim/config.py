"""Configuration for the trim angle-of-attack solver."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TrimSettings:
    """Bracket and convergence settings of the trim root-find.

    Args:
        lower_bound: Lower end of the angle-of-attack bracket [rad].
        upper_bound: Upper end of the angle-of-attack bracket [rad].
        angle_tolerance: Convergence threshold on the width of the
            sign-changing bracket [rad].
        moment_tolerance: Convergence threshold on ``|C_m|``.
        max_iterations: Maximum number of root-find iterations.

    Examples:
        ```python
        import math
        from aerojax.trim import TrimSettings
        settings = TrimSettings(lower_bound=0.0, upper_bound=math.radians(40.0))
        ```
    """

    lower_bound: float = -math.pi / 2.0
    upper_bound: float = math.pi / 2.0
    angle_tolerance: float = 1.0e-10
    moment_tolerance: float = 1.0e-12
    max_iterations: int = 100

    def __post_init__(self) -> None:
        if not self.lower_bound < self.upper_bound:
            raise ValueError(
                f"lower_bound must be less than upper_bound, got "
                f"[{self.lower_bound}, {self.upper_bound}]"
            )
        if self.angle_tolerance <= 0.0 or self.moment_tolerance < 0.0:
            raise ValueError(
                f"Tolerances must be positive, got angle_tolerance={self.angle_tolerance}, "
                f"moment_tolerance={self.moment_tolerance}"
            )
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
