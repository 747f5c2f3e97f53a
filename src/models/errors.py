"""
Effect errors

Everything the engine raises synchronously to callers. Faults that happen
inside a running effect are never raised; they are logged and surfaced
through the completion path instead.
"""

from typing import Optional


class EffectError(Exception):
    """Base class for effect engine errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class EffectConfigError(EffectError, ValueError):
    """Invalid effect parameters (raised at build time, never during a run)"""
    def __init__(self, effect: str, message: str, details: Optional[dict] = None):
        super().__init__(
            code="INVALID_EFFECT_CONFIG",
            message=f"{effect}: {message}",
            details={"effect": effect, **(details or {})}
        )

    @classmethod
    def from_validation(cls, effect: str, exc) -> 'EffectConfigError':
        """
        Build from a pydantic ValidationError

        Each failing field becomes one details entry: {"field.path": "reason"}
        """
        errors = {}
        missing = []
        for err in exc.errors():
            field = ".".join(str(x) for x in err.get("loc", ())) or "__root__"
            errors[field] = err.get("msg", "invalid")
            if err.get("type") == "missing":
                missing.append(field)
        summary = "; ".join(f"{k}: {v}" for k, v in errors.items())
        return cls(effect, summary, {"errors": errors, "missing": missing})

    @property
    def only_missing(self) -> bool:
        """True if the only problem is required fields not supplied yet"""
        errors = self.details.get("errors", {})
        missing = self.details.get("missing", [])
        return bool(errors) and set(errors) == set(missing)


class EffectAlreadyRunningError(EffectError, RuntimeError):
    """start() called while a run is active; the active run is unaffected"""
    def __init__(self, effect: str, run_id: int):
        super().__init__(
            code="EFFECT_ALREADY_RUNNING",
            message=f"{effect} is already running (run {run_id})",
            details={"effect": effect, "run_id": run_id}
        )


class SchedulingFault(EffectError):
    """
    A fault in the step scheduling machinery that ended a run

    Never raised to callers; passed to on_fault callbacks and kept as the
    controller's last_error. The original exception is chained as __cause__.
    """
    def __init__(self, effect: str, run_id: int, reason: str):
        super().__init__(
            code="SCHEDULING_FAULT",
            message=f"{effect} run {run_id} aborted: {reason}",
            details={"effect": effect, "run_id": run_id}
        )
