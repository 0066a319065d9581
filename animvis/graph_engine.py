import logging
import math
import random

import networkx as nx

from animvis.errors import ConfigurationError, TransientRenderSkip

logger = logging.getLogger(__name__)

DEMO_NODES = [
    {"id": "A", "group": 1},
    {"id": "B", "group": 1},
    {"id": "C", "group": 2},
    {"id": "D", "group": 2},
    {"id": "E", "group": 3},
    {"id": "F", "group": 3},
    {"id": "G", "group": 1},
]

DEMO_LINKS = [
    ("A", "B"), ("A", "C"), ("B", "D"), ("C", "D"),
    ("C", "E"), ("E", "F"), ("F", "G"), ("G", "A"),
]


def demo_graph():
    """The seven-node sample graph shown on the landing page."""
    graph = nx.Graph()
    for node in DEMO_NODES:
        graph.add_node(node["id"], group=node["group"])
    graph.add_edges_from(DEMO_LINKS)
    return graph


def _hashable(value):
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _coordinate(item, name):
    """Seeded coordinate from a node entry, or None when absent."""
    value = item.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ConfigurationError(f"Node {item['id']!r} has a bad {name} coordinate: {value!r}")
    return float(value)


class Node:
    def __init__(self, key, group=None, x=None, y=None):
        self.key = key
        self.group = group
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0
        # Pin (overrides integration when set)
        self.fx = None
        self.fy = None

    @property
    def pinned(self):
        return self.fx is not None


class Link:
    def __init__(self, source, target):
        self.source = source
        self.target = target
        # Share of the correction applied to the target
        self.bias = 0.5


class DragSession:
    def __init__(self, node_key, owner=None):
        self.node_key = node_key
        self.owner = owner


class GraphLayoutEngine:
    def __init__(self, nodes, links, width, height, seed=None):
        self.rng = random.Random(seed)
        self.nodes = {}  # key -> Node
        self.links = []
        self.degree = {}  # key -> link count
        self.sessions = {}  # key -> DragSession

        # Physics constants
        self.link_distance = 80.0
        self.link_strength = 0.7
        self.charge_strength = -1050.0
        self.distance_min = 1.0
        self.center_strength = 1.0
        self.velocity_decay = 0.4
        self.jitter = 10.0

        # Energy
        self.alpha = 1.0
        self.alpha_target = 0.0
        self.alpha_min = 0.001
        self.alpha_decay = 1 - self.alpha_min ** (1 / 300)
        self.boost_target = 0.3
        self.active = True

        self.width = width
        self.height = height
        self.center = (width / 2, height / 2)
        self.ready = width > 0 and height > 0

        self._load(nodes, links)
        logger.debug("Layout engine built with %d nodes and %d links",
                     len(self.nodes), len(self.links))

    @classmethod
    def from_networkx(cls, graph, width, height, seed=None):
        nodes = [{"id": n, "group": data.get("group")} for n, data in graph.nodes(data=True)]
        return cls(nodes, list(graph.edges()), width, height, seed=seed)

    @classmethod
    def from_node_link(cls, data, width, height, seed=None):
        """Builds an engine from ``{"nodes": [...], "links": [...]}`` data."""
        if not isinstance(data, dict) or not isinstance(data.get("nodes"), list):
            raise ConfigurationError("Node-link data needs a 'nodes' list")
        if not isinstance(data.get("links", []), list):
            raise ConfigurationError("Node-link 'links' must be a list")
        return cls(data["nodes"], data.get("links", []), width, height, seed=seed)

    def _load(self, nodes, links):
        cx, cy = self.center
        for item in nodes:
            try:
                key = item["id"]
            except (KeyError, TypeError):
                raise ConfigurationError(f"Node entry without an id: {item!r}")
            if not _hashable(key):
                raise ConfigurationError(f"Node key must be hashable: {key!r}")
            if key in self.nodes:
                raise ConfigurationError(f"Duplicate node key: {key!r}")

            x = _coordinate(item, "x")
            y = _coordinate(item, "y")
            node = Node(key, item.get("group"), x, y)
            if node.x is None:
                node.x = cx + self.rng.uniform(-self.jitter, self.jitter)
            if node.y is None:
                node.y = cy + self.rng.uniform(-self.jitter, self.jitter)
            self.nodes[key] = node
            self.degree[key] = 0

        for item in links:
            if isinstance(item, dict):
                u, v = item.get("source"), item.get("target")
            else:
                try:
                    u, v = item
                except (TypeError, ValueError):
                    raise ConfigurationError(f"Link must be a (source, target) pair: {item!r}")
            for key in (u, v):
                if not _hashable(key) or key not in self.nodes:
                    raise ConfigurationError(f"Link {u!r}-{v!r} references unknown node {key!r}")
            self.links.append(Link(self.nodes[u], self.nodes[v]))
            self.degree[u] += 1
            self.degree[v] += 1

        # Busier endpoints move less
        for link in self.links:
            s = self.degree[link.source.key]
            link.bias = s / (s + self.degree[link.target.key])

    def _node(self, key):
        try:
            return self.nodes[key]
        except KeyError:
            raise KeyError(f"Unknown node: {key!r}") from None

    def _jiggle(self):
        return (self.rng.random() - 0.5) * 1e-6

    # --- Energy ---

    @property
    def is_settled(self):
        return self.alpha < self.alpha_min

    def boost(self):
        self.alpha_target = self.boost_target
        self.alpha = max(self.alpha, self.boost_target)
        self.active = True

    def settle(self):
        self.alpha_target = 0.0

    def reheat(self):
        self.alpha = max(self.alpha, self.boost_target)
        self.active = True

    # --- Container ---

    def resize(self, width, height):
        if width <= 0 or height <= 0:
            logger.debug("Graph container not laid out yet (%sx%s)", width, height)
            self.width, self.height, self.ready = width, height, False
            return
        self.width, self.height, self.center, self.ready = width, height, (width / 2, height / 2), True
        self.reheat()

    # --- Pins & drag ---

    def pin(self, key, x, y):
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Pin for {key!r} must be finite, got ({x}, {y})")
        node = self._node(key)
        node.fx = x
        node.fy = y

    def unpin(self, key):
        node = self._node(key)
        node.fx = None
        node.fy = None

    def drag_start(self, key, owner=None):
        node = self._node(key)
        session = self.sessions.get(key)
        if session is not None:
            session.owner = owner
            return session

        if not self.sessions:
            self.boost()
        session = DragSession(key, owner)
        self.sessions[key] = session
        self.pin(key, node.x, node.y)
        logger.debug("Drag started on %s", key)
        return session

    def drag_move(self, key, x, y, owner=None):
        session = self.sessions.get(key)
        if session is None or session.owner != owner:
            logger.debug("Ignoring drag-move on %s from %r", key, owner)
            return False
        self.pin(key, x, y)
        return True

    def drag_end(self, key, owner=None):
        session = self.sessions.get(key)
        if session is None or session.owner != owner:
            logger.debug("Ignoring drag-end on %s from %r", key, owner)
            return False
        del self.sessions[key]
        self.unpin(key)
        if not self.sessions:
            self.settle()
        logger.debug("Drag ended on %s", key)
        return True

    # --- Simulation ---

    def step(self, decay=None):
        """Advances the layout one tick and returns ``{key: (x, y)}``."""
        if not self.ready:
            raise TransientRenderSkip(f"Graph container is {self.width}x{self.height}")
        if decay is None:
            decay = self.alpha_decay
        elif not 0 <= decay <= 1:
            raise ValueError(f"Energy decay must be within [0, 1], got {decay}")

        self.alpha += (self.alpha_target - self.alpha) * decay

        node_items = list(self.nodes.values())

        # 1. Spring attraction (links)
        for link in self.links:
            n1, n2 = link.source, link.target
            dx = (n2.x + n2.vx - n1.x - n1.vx) or self._jiggle()
            dy = (n2.y + n2.vy - n1.y - n1.vy) or self._jiggle()
            dist = math.sqrt(dx * dx + dy * dy)

            f = (dist - self.link_distance) / dist * self.alpha * self.link_strength
            dx *= f
            dy *= f

            if not n2.pinned:
                n2.vx -= dx * link.bias
                n2.vy -= dy * link.bias
            if not n1.pinned:
                n1.vx += dx * (1 - link.bias)
                n1.vy += dy * (1 - link.bias)

        # 2. Repulsion (all vs all)
        min_sq = self.distance_min * self.distance_min
        for n1 in node_items:
            if n1.pinned:
                continue
            for n2 in node_items:
                if n2 is n1:
                    continue
                dx = n2.x - n1.x
                dy = n2.y - n1.y
                if dx == 0:
                    dx = self._jiggle()
                if dy == 0:
                    dy = self._jiggle()

                dist_sq = dx * dx + dy * dy
                if dist_sq < min_sq:
                    dist_sq = math.sqrt(min_sq * dist_sq)

                w = self.charge_strength * self.alpha / dist_sq
                n1.vx += dx * w
                n1.vy += dy * w

        # 3. Centering (move the centroid onto the container center)
        if node_items:
            cx, cy = self.center
            sx = (sum(n.x for n in node_items) / len(node_items) - cx) * self.center_strength
            sy = (sum(n.y for n in node_items) / len(node_items) - cy) * self.center_strength
            for n in node_items:
                if not n.pinned:
                    n.x -= sx
                    n.y -= sy

        # 4. Integration
        keep = 1 - self.velocity_decay
        for n in node_items:
            if n.pinned:
                n.x, n.y = n.fx, n.fy
                n.vx = n.vy = 0.0
                continue
            n.vx *= keep
            n.vy *= keep
            n.x += n.vx
            n.y += n.vy

        if self.is_settled and self.alpha_target < self.alpha_min:
            self.active = False

        return self.positions()

    def positions(self):
        return {key: (n.x, n.y) for key, n in self.nodes.items()}

    def link_segments(self):
        """Returns ``(source_key, target_key, x1, y1, x2, y2)`` per link."""
        return [
            (l.source.key, l.target.key, l.source.x, l.source.y, l.target.x, l.target.y)
            for l in self.links
        ]
