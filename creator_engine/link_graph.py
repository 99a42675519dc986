"""
creator_engine/link_graph.py -- Link graph of characters, worlds and projects (NetworkX)

Builds a directed graph from a store snapshot.  Each entity is a node typed
``character``, ``world`` or ``project``; each existing link is an edge from
the member to its container (character -> world, character -> project,
world -> project).  Links are read from the member's foreign keys
(``world_id``/``project_id``) and from the project's ``character_ids`` and
``world_ids`` lists.

Links that point at entities missing from the snapshot are kept aside in
:attr:`LinkGraph.dangling` rather than creating stub nodes.

Usage:
    from creator_engine.link_graph import LinkGraph

    lg = LinkGraph(characters, worlds, projects)
    lg.get_unlinked("character")
    lg.get_linked("#KIRA_001")   -> {"character": [], "world": [...], "project": [...]}
    candidates = lg.overlay_suggestions(generate_link_suggestions(...))
"""

import logging
from typing import Iterable

import networkx as nx

from creator_engine.models import Character, LinkSuggestion, Project, World

logger = logging.getLogger(__name__)

ENTITY_TYPES = ("character", "world", "project")


class LinkGraph:
    """In-memory directed graph of entities and their links.

    Parameters
    ----------
    characters, worlds, projects : iterable
        Store snapshots, as models or camelCase dicts.  Entities without an
        ``id`` are ignored.
    """

    def __init__(self, characters=(), worlds=(), projects=()):
        self.graph: nx.DiGraph = nx.DiGraph()
        # (source_id, target_id, relationship) for links whose target is absent
        self.dangling: list[tuple[str, str, str]] = []
        self._build(
            Character.coerce_many(characters),
            World.coerce_many(worlds),
            Project.coerce_many(projects),
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _build(self, characters: list, worlds: list, projects: list) -> None:
        # Pass 1: nodes
        for entity_type, entities in (
            ("character", characters), ("world", worlds), ("project", projects),
        ):
            for entity in entities:
                if not entity.id:
                    continue
                self.graph.add_node(entity.id, entity_type=entity_type, name=entity.name or entity.id)

        # Pass 2: edges from foreign keys
        for character in characters:
            if character.world_id:
                self._link(character.id, character.world_id, "world")
            if character.project_id:
                self._link(character.id, character.project_id, "project")
        for world in worlds:
            if world.project_id:
                self._link(world.id, world.project_id, "project")

        # Pass 3: edges from the project's member lists
        for project in projects:
            for character_id in project.character_ids:
                self._link(character_id, project.id, "project")
            for world_id in project.world_ids:
                self._link(world_id, project.id, "project")

        logger.debug(
            "Link graph built: %d nodes, %d edges, %d dangling",
            self.graph.number_of_nodes(), self.graph.number_of_edges(), len(self.dangling),
        )

    def _link(self, source_id: str, target_id: str, relationship: str) -> None:
        if not source_id or not target_id:
            return
        if source_id not in self.graph or target_id not in self.graph:
            self.dangling.append((source_id, target_id, relationship))
            return
        if not self.graph.has_edge(source_id, target_id):
            self.graph.add_edge(source_id, target_id, relationship_type=relationship)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_unlinked(self, entity_type: str | None = None) -> list[str]:
        """Return IDs of entities with no links at all, optionally of one type.

        Returns
        -------
        list[str]
            Sorted entity IDs.
        """
        return sorted(
            node for node, attrs in self.graph.nodes(data=True)
            if self.graph.degree(node) == 0
            and (entity_type is None or attrs.get("entity_type") == entity_type)
        )

    def get_neighbors(self, entity_id: str, depth: int = 1) -> list[str]:
        """Return entity IDs reachable within *depth* link hops, in either
        direction.  Empty if the entity is not in the graph."""
        if entity_id not in self.graph:
            return []
        lengths = nx.single_source_shortest_path_length(
            self.graph.to_undirected(as_view=True), entity_id, cutoff=depth,
        )
        return sorted(node for node in lengths if node != entity_id)

    def get_linked(self, entity_id: str) -> dict[str, list[str]]:
        """Return the directly linked entity IDs grouped by entity type."""
        result: dict[str, list[str]] = {t: [] for t in ENTITY_TYPES}
        if entity_id not in self.graph:
            return result
        for neighbor in self.get_neighbors(entity_id, depth=1):
            entity_type = self.graph.nodes[neighbor].get("entity_type")
            if entity_type in result:
                result[entity_type].append(neighbor)
        return result

    def get_components(self) -> list[list[str]]:
        """Connected groups of entities, largest first."""
        undirected = self.graph.to_undirected(as_view=True)
        components = [sorted(c) for c in nx.connected_components(undirected)]
        components.sort(key=lambda c: (-len(c), c[0]))
        return components

    def get_stats(self) -> dict:
        """Return summary statistics about the graph.

        Returns
        -------
        dict
            Keys: ``node_count``, ``edge_count``, ``unlinked_count``,
            ``component_count``, ``counts_by_type``, ``dangling_count``.
        """
        counts_by_type = {t: 0 for t in ENTITY_TYPES}
        for _, attrs in self.graph.nodes(data=True):
            entity_type = attrs.get("entity_type")
            if entity_type in counts_by_type:
                counts_by_type[entity_type] += 1

        node_count = self.graph.number_of_nodes()
        return {
            "node_count": node_count,
            "edge_count": self.graph.number_of_edges(),
            "unlinked_count": len(self.get_unlinked()),
            "component_count": nx.number_weakly_connected_components(self.graph) if node_count else 0,
            "counts_by_type": counts_by_type,
            "dangling_count": len(self.dangling),
        }

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def overlay_suggestions(self, suggestions: Iterable[LinkSuggestion]) -> nx.DiGraph:
        """Return a copy of the graph with suggestions added as candidate edges.

        Candidate edges carry ``suggested=True``, ``confidence`` and
        ``reason``.  Suggestions naming unknown entities, or pairs that are
        already linked, are skipped.  The graph itself is left untouched.
        """
        overlay = self.graph.copy()
        for suggestion in suggestions:
            source, target = suggestion.source_id, suggestion.target_id
            if source not in overlay or target not in overlay:
                continue
            if overlay.has_edge(source, target):
                continue
            overlay.add_edge(
                source,
                target,
                relationship_type=suggestion.target_type,
                suggested=True,
                confidence=suggestion.confidence,
                reason=suggestion.reason,
            )
        return overlay
