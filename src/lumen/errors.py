"""Exception types raised by the tracer.

Geometric edge cases (rays that miss, roots outside the query interval,
empty object lists) are not errors; they are reported as ``None`` hits.
"""


class ConfigurationError(ValueError):
    """A scene, camera, material or render setting was constructed with an invalid value."""


class SamplingError(RuntimeError):
    """A rejection-sampling loop exceeded its attempt cap.

    This indicates an internal fault (a broken random source) and should never
    happen with a well-behaved generator.
    """


class FrameLockError(RuntimeError):
    """The shared frame buffer could not be locked safely.

    Raised when the lock cannot be acquired within the configured timeout, or
    when a previous writer failed while holding the lock and left the buffer
    in an untrusted state.
    """
