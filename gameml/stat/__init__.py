from .basic_statistical_summary import BasicStatisticalSummary

__all__ = ["BasicStatisticalSummary"]
