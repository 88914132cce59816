from typing import Any, Dict, Iterable, List, Optional


DEFAULT_SEARCH_LIMIT = 20


def extract_entities(graph: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return the dict entries of ``graph["entities"]``."""
    entities = graph.get("entities") if isinstance(graph, dict) else None
    if not isinstance(entities, list):
        return []
    return [entity for entity in entities if isinstance(entity, dict)]


class EntityFilter:
    """Filters entities of a knowledge graph fetched from RAGFlow."""

    def filter_by_query(self, graph: Dict[str, Any], search_data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Match entity names against ``query`` and optionally ``entity_type``.

        The name match is a case-insensitive substring test; an empty query
        matches every entity. At most ``limit`` entities are returned.
        """
        query = search_data.get("query")
        query = query.lower() if isinstance(query, str) else ""

        entity_type = search_data.get("entity_type")
        if not isinstance(entity_type, str) or entity_type == "":
            entity_type = None

        limit = search_data.get("limit")
        limit = int(limit) if limit is not None else DEFAULT_SEARCH_LIMIT

        matches = []
        for entity in extract_entities(graph):
            if len(matches) >= limit:
                break
            if self._name_matches(entity, query) and self._type_matches(entity, entity_type):
                matches.append(entity)

        return matches

    def get_by_ids(self, graph: Dict[str, Any], entity_ids: Iterable[str]) -> List[Dict[str, Any]]:
        wanted = set(entity_ids)
        if not wanted:
            return []
        return [entity for entity in extract_entities(graph) if entity.get("id") in wanted]

    def _name_matches(self, entity: Dict[str, Any], query: str) -> bool:
        if query == "":
            return True
        name = entity.get("name")
        return isinstance(name, str) and name != "" and query in name.lower()

    def _type_matches(self, entity: Dict[str, Any], entity_type: Optional[str]) -> bool:
        if entity_type is None:
            return True
        return entity.get("type") == entity_type
