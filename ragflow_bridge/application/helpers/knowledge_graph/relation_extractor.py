from typing import Any, Dict, List, Tuple


class RelationExtractor:
    """Collects the relations touching one entity."""

    def extract_entity_relations(
        self,
        graph: Dict[str, Any],
        entity_id: str,
        max_relations: int
    ) -> Tuple[List[Dict[str, Any]], List[str]]:
        """Return matching relations and the ordered unique ids of the other endpoints."""
        relations = graph.get("relations") if isinstance(graph, dict) else None
        if not isinstance(relations, list) or max_relations <= 0:
            return [], []

        matching = []
        for relation in relations:
            if not isinstance(relation, dict):
                continue
            if relation.get("source") == entity_id or relation.get("target") == entity_id:
                matching.append(relation)
                if len(matching) >= max_relations:
                    break

        related_ids = []
        for relation in matching:
            for endpoint in (relation.get("source"), relation.get("target")):
                if endpoint and endpoint != entity_id and endpoint not in related_ids:
                    related_ids.append(endpoint)

        return matching, related_ids
