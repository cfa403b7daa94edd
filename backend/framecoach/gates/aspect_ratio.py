"""Gate 0: camera aspect ratio must match the reference photo."""

from framecoach.gates.base import GateContext, PureGate
from framecoach.models.gate import GateCategory, GateResult


class AspectRatioGate(PureGate):
    """Binary gate: 1.0 when the aspect ratios match, 0.0 otherwise."""
    name = "Aspect ratio"
    priority = 0
    base_threshold = 1.0

    def evaluate(self, context: GateContext) -> GateResult:
        reference = context.reference
        if reference is None:
            return self.reference_missing()

        current = context.live.aspect_ratio
        target = reference.aspect_ratio
        debug_info = f"current: {current.display_name} vs target: {target.display_name}"

        if current == target:
            return self.result(1.0, self.base_threshold, "", GateCategory.ASPECT_RATIO, debug_info)

        return self.result(
            0.0,
            self.base_threshold,
            f"Change camera ratio to {target.display_name}",
            GateCategory.ASPECT_RATIO,
            debug_info,
        )
