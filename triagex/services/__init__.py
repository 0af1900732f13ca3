# Mark services as a package and expose the service modules routes rely on.

from . import assessments as assessments  # noqa: F401
from . import catalog as catalog  # noqa: F401
from . import diagnosis as diagnosis  # noqa: F401

__all__ = [
    "assessments",
    "catalog",
    "diagnosis",
]
