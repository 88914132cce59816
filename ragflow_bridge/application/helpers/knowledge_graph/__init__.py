from .entity_filter import EntityFilter
from .relation_extractor import RelationExtractor
from .stats_calculator import StatsCalculator

__all__ = ["EntityFilter", "RelationExtractor", "StatsCalculator"]
