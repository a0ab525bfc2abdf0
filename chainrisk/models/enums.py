"""
Enumeration types for the ChainRisk engine.

All enums inherit from str to ensure JSON serialization compatibility
with the graph datasets produced by the ingestion collaborator.
"""

from enum import Enum


class NodeKind(str, Enum):
    """
    Role of an entity in the supply chain.

    The set is closed: datasets naming any other kind are rejected at
    model construction, which keeps critical-node predicates exhaustive.
    """

    RAW_MATERIALS = "raw_materials"
    SUPPLIER = "supplier"
    MANUFACTURER = "manufacturer"
    DISTRIBUTOR = "distributor"
    RETAILER = "retailer"
    WAREHOUSE = "warehouse"
    CUSTOMER = "customer"


class EdgeKind(str, Enum):
    """Kind of flow carried by an edge."""

    MATERIAL_FLOW = "material_flow"
    INFORMATION_FLOW = "information_flow"
    FINANCIAL_FLOW = "financial_flow"
    TRANSPORTATION = "transportation"


class TraversalDirection(str, Enum):
    """Direction of an impact trace relative to edge orientation."""

    DOWNSTREAM = "downstream"
    UPSTREAM = "upstream"


class SessionStatus(str, Enum):
    """Lifecycle status of a crisis simulation session."""

    INACTIVE = "inactive"
    ACTIVE = "active"
