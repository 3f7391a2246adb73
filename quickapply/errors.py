"""Error taxonomy for the application engine"""


class QuickApplyError(Exception):
    """Base class for all engine errors"""


class ConfigError(QuickApplyError):
    """Settings or answer file could not be loaded"""


class SetupFailure(QuickApplyError):
    """The listing surface never materialized; ends the platform, never retried"""


class BlockDetected(QuickApplyError):
    """Anti-automation challenge seen; ends the platform for the rest of the run"""


class ValidationStuck(QuickApplyError):
    """Step loop cycled or hit its ceiling; ends the job, never retried"""

    def __init__(self, reason, steps=0):
        super().__init__(f"{reason} after {steps} step(s)")
        self.reason = reason
        self.steps = steps


class TransientStepFailure(QuickApplyError):
    """Recoverable failure inside an attempt; the job may be retried"""


class AlreadyHandled(QuickApplyError):
    """The platform reports a prior application for this job"""


class NotEligible(QuickApplyError):
    """Job has no one-click flow (external apply, redirect, incomplete profile)"""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class LedgerError(QuickApplyError):
    """Ledger write rejected"""
