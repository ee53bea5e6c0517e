from .verifier_config import MetricFamily, MetricFamilyError, VerifierConfig, detect_family

__all__ = ["MetricFamily", "MetricFamilyError", "VerifierConfig", "detect_family"]
