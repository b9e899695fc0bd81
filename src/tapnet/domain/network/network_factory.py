# tapnet/domain/network/network_factory.py
from collections.abc import Sequence

from tapnet.app.protocols import GeodesyProvider
from tapnet.domain.entities.geography import Point, Segment
from tapnet.domain.entities.tree import TreeNode
from tapnet.domain.network.network_builder import TreeBuilder
from tapnet.domain.network.network_rules import TopologyValidator


def build_network(
    segments: Sequence[Segment],
    reference: Point,
    geodesy: GeodesyProvider,
    *,
    validator: TopologyValidator | None = None,
) -> TreeNode:
    """Build the rooted tree and gate it on the tapped-line rules."""
    segments = list(segments)
    root = TreeBuilder(geodesy).build(segments, reference)
    (validator or TopologyValidator()).validate(segments, root)
    return root
