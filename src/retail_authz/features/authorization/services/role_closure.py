"""
Role Closure Engine.

The closure of a principal is every role assigned to it in a tenant plus all
of their ancestors. Each role has at most one parent, so the closure is the
union of the ancestor chains of the assigned roles. The chains are walked
iteratively over an in-memory role index: diamonds are deduplicated by role
id, and a chain that revisits one of its own roles raises ``RoleCycleError``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set

from loguru import logger

from ...org_units.services import OrgUnitService
from ...roles.entities import Role
from ...roles.services import RoleGraphService
from ....core.exceptions import RoleCycleError


@dataclass(frozen=True)
class RoleClosure:
    """Assigned roles of a principal plus their ancestors, keyed by role id."""

    tenant_id: str
    user_id: str
    roles: Mapping[int, Role] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'roles', MappingProxyType(dict(self.roles)))

    @property
    def role_ids(self) -> FrozenSet[int]:
        return frozenset(self.roles)

    @property
    def role_names(self) -> FrozenSet[str]:
        return frozenset(role.normalized_name for role in self.roles.values())

    @property
    def is_empty(self) -> bool:
        return not self.roles

    def __contains__(self, role_id: int) -> bool:
        return role_id in self.roles

    def __len__(self) -> int:
        return len(self.roles)


def expand_roles(
    seed_ids: Iterable[int],
    index: Mapping[int, Role],
    tenant_id: str,
) -> Dict[int, Role]:
    """Collect the seed roles and all of their ancestors from ``index``.

    Each chain is walked upward until it reaches a root, a role outside the
    tenant index, or a role whose chain was already verified.

    Raises:
        RoleCycleError: a parent chain loops back on itself
    """
    collected: Dict[int, Role] = {}

    for seed_id in seed_ids:
        chain: List[int] = []
        on_chain: Set[int] = set()
        role_id: Optional[int] = seed_id

        while role_id is not None and role_id not in collected:
            if role_id in on_chain:
                cycle = chain + [role_id]
                logger.bind(event="ROLE_CYCLE_DETECTED", tenant_id=tenant_id).error(
                    f"Role hierarchy cycle detected: {' -> '.join(str(i) for i in cycle)}"
                )
                raise RoleCycleError(
                    "Role hierarchy contains a cycle",
                    details={"tenant_id": tenant_id, "cycle": cycle},
                )

            role = index.get(role_id)
            if role is None or role.tenant_id != tenant_id:
                logger.warning(
                    f"Role {role_id} referenced in tenant {tenant_id} but not found in its role index"
                )
                break

            chain.append(role_id)
            on_chain.add(role_id)
            role_id = role.parent_role_id

        for verified_id in chain:
            collected[verified_id] = index[verified_id]

    return collected


class RoleClosureEngine:
    """Computes role closures for principals within a tenant."""

    def __init__(
        self,
        role_graph: RoleGraphService,
        org_units: Optional[OrgUnitService] = None,
        enforce_validity: bool = True,
        inherit_org_unit_assignments: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.role_graph = role_graph
        self.org_units = org_units
        self.enforce_validity = enforce_validity
        self.inherit_org_unit_assignments = inherit_org_unit_assignments
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def closure(
        self,
        user_id: str,
        tenant_id: str,
        org_unit_id: Optional[int] = None,
    ) -> RoleClosure:
        """Compute the role closure of ``user_id`` in ``tenant_id``.

        When ``org_unit_id`` is given only assignments scoped to that unit
        count, or to one of its ancestors when org unit inheritance is on.
        """
        org_unit_ids = await self._org_unit_scope(org_unit_id, tenant_id)
        assignments = await self.role_graph.assignments_for(
            user_id, tenant_id, org_unit_ids=org_unit_ids
        )

        if self.enforce_validity:
            now = self._clock()
            assignments = [a for a in assignments if a.is_effective_at(now)]

        if not assignments:
            return RoleClosure(tenant_id=tenant_id, user_id=user_id)

        index = await self.role_graph.role_index(tenant_id)
        roles = expand_roles((a.role_id for a in assignments), index, tenant_id)
        return RoleClosure(tenant_id=tenant_id, user_id=user_id, roles=roles)

    async def _org_unit_scope(self, org_unit_id: Optional[int], tenant_id: str) -> Optional[List[int]]:
        if org_unit_id is None:
            return None
        if self.inherit_org_unit_assignments and self.org_units is not None:
            return await self.org_units.scope_chain(org_unit_id, tenant_id)
        return [org_unit_id]
