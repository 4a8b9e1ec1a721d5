"""
EM precision-matrix backends.
"""

from emgaussian.emprec.backends.em import EMPrecisionBackend

__all__ = ['EMPrecisionBackend']
