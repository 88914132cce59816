from collections import Counter
from typing import Any, Dict

from .entity_filter import extract_entities


class StatsCalculator:
    """Counts entities and relations of a knowledge graph."""

    def calculate(self, graph: Dict[str, Any]) -> Dict[str, Any]:
        entities = extract_entities(graph)
        relations = graph.get("relations") if isinstance(graph, dict) else None
        relations = [relation for relation in relations or [] if isinstance(relation, dict)]

        return {
            "total_entities": len(entities),
            "total_relations": len(relations),
            "entity_types": self._count_types(entities),
            "relation_types": self._count_types(relations),
        }

    def _count_types(self, items) -> Dict[str, int]:
        counter = Counter(item["type"] for item in items if isinstance(item.get("type"), str))
        return dict(counter)
