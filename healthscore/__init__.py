"""
Health Score Core Package
=========================

Questionnaire scoring engine for preventive-health macroareas.

This package contains:
    - schemas/: Rule bundle and result models
    - scoring/: Answer mapping, feature scoring, red flags, aggregation
    - loader: YAML macroarea bundle loading
    - config: Application settings
    - logging: Structured logging setup

Author: HealthScore Team
Version: 1.0.0
"""

__version__ = "1.0.0"
