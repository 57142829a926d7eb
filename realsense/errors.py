class CameraError(Exception):
    """Base class for camera errors."""


class AcquisitionTimeout(CameraError):
    """No frame pair arrived within the timeout. The caller should retry."""


class AcquisitionError(CameraError):
    """Device or pipeline fault while waiting for frames."""


class MissingFrameError(AcquisitionError):
    """A frameset arrived without one of the enabled streams."""


class PipelineStateError(CameraError):
    """Operation is not valid in the pipeline's current state."""
