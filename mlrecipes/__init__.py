"""
Stand-alone machine-learning recipes built on scikit-learn and XGBoost.
"""

__version__ = "0.1.0"
