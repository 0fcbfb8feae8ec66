"""Service modules"""
from .analyzer import InvalidPositionError, RiskAnalyzer

__all__ = ["RiskAnalyzer", "InvalidPositionError"]
