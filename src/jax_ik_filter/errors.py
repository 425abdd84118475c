"""Exceptions raised by jax_ik_filter.

Setup problems (bad parameters, unusable goals) raise immediately. A failed
Jacobian query aborts an IK solve; the solver reports it as a ``Failed``
result rather than letting it escape. Running out of iterations is not an
error at all.
"""


class IKFilterError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(IKFilterError, ValueError):
    """Filter parameters are missing, malformed or inconsistent."""


class InvalidGoalError(IKFilterError, ValueError):
    """No usable goal pose could be derived from a motion plan request."""


class KinematicsError(IKFilterError):
    """The kinematic model could not answer a query."""


class JacobianError(KinematicsError):
    """A Jacobian was requested for a link the model cannot provide one for."""
