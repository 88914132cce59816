"""Knowledge graph use case"""

from typing import Any, Dict, Optional

from ...infrastructure.external.ragflow_client import RAGFlowClient
from ..helpers.knowledge_graph import EntityFilter, RelationExtractor, StatsCalculator

DEFAULT_RELATION_DEPTH = 1
DEFAULT_MAX_RELATIONS = 50


class KnowledgeGraphUseCase:
    """Use case for querying the knowledge graph of a RAGFlow dataset"""

    def __init__(
        self,
        client: RAGFlowClient,
        entity_filter: EntityFilter = None,
        relation_extractor: RelationExtractor = None,
        stats_calculator: StatsCalculator = None
    ):
        self.client = client
        self.entity_filter = entity_filter or EntityFilter()
        self.relation_extractor = relation_extractor or RelationExtractor()
        self.stats_calculator = stats_calculator or StatsCalculator()

    async def get_graph(self, dataset_id: str, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch the graph; filters are echoed back, not applied."""
        graph = await self.client.get_knowledge_graph(dataset_id)
        filters = {key: value for key, value in (filters or {}).items() if value is not None and value != ""}
        return {"graph": graph, "filters": filters}

    async def search_entities(self, dataset_id: str, search_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Search entities by name and type."""
        search_data = search_data or {}
        query = search_data.get("query")
        if not query:
            raise ValueError("Query is required")

        graph = await self.client.get_knowledge_graph(dataset_id)
        entities = self.entity_filter.filter_by_query(graph, search_data)

        return {
            "entities": entities,
            "total_found": len(entities),
            "query": query,
            "entity_type": search_data.get("entity_type"),
        }

    async def get_entity_relations(
        self,
        dataset_id: str,
        entity_id: str,
        depth: int = DEFAULT_RELATION_DEPTH,
        max_relations: int = DEFAULT_MAX_RELATIONS
    ) -> Dict[str, Any]:
        """Relations touching one entity, with the entities on their other end."""
        graph = await self.client.get_knowledge_graph(dataset_id)
        relations, related_ids = self.relation_extractor.extract_entity_relations(graph, entity_id, max_relations)

        return {
            "entity_id": entity_id,
            "relations": relations,
            "related_entities": self.entity_filter.get_by_ids(graph, related_ids),
            "total_relations": len(relations),
            "depth": depth,
        }

    async def get_stats(self, dataset_id: str) -> Dict[str, Any]:
        """Entity and relation counts of the graph."""
        graph = await self.client.get_knowledge_graph(dataset_id)
        return self.stats_calculator.calculate(graph)
