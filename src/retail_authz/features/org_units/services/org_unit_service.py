"""Org unit graph service.

Walks the org unit forest iteratively. A stored cycle is reported as
``OrgUnitCycleError`` instead of looping.
"""

import logging
from collections import deque
from typing import Dict, List, Set

from ..entities import OrgUnit, OrgUnitRepository
from ....core.exceptions import OrgUnitCycleError

logger = logging.getLogger(__name__)


class OrgUnitService:
    """Read API over a tenant's org unit hierarchy."""

    def __init__(self, repository: OrgUnitRepository):
        self.repository = repository

    async def org_unit_index(self, tenant_id: str) -> Dict[int, OrgUnit]:
        units = await self.repository.list_for_tenant(tenant_id)
        return {unit.id: unit for unit in units if unit.tenant_id == tenant_id}

    async def ancestors(self, org_unit_id: int, tenant_id: str) -> List[OrgUnit]:
        """Ancestors of an org unit, nearest first, excluding the unit itself."""
        index = await self.org_unit_index(tenant_id)
        return self._ancestors(org_unit_id, index)

    async def scope_chain(self, org_unit_id: int, tenant_id: str) -> List[int]:
        """The unit id followed by its ancestor ids."""
        index = await self.org_unit_index(tenant_id)
        return [org_unit_id] + [unit.id for unit in self._ancestors(org_unit_id, index)]

    async def descendants(self, org_unit_id: int, tenant_id: str) -> List[OrgUnit]:
        """Every unit below an org unit, breadth first."""
        index = await self.org_unit_index(tenant_id)
        return self._descendants(org_unit_id, index)

    async def is_member(
        self,
        user_id: str,
        org_unit_id: int,
        tenant_id: str,
        include_descendants: bool = True
    ) -> bool:
        """Check direct membership in a unit, or in a unit below it."""
        memberships = await self.repository.list_memberships(user_id, tenant_id)
        unit_ids = {m.org_unit_id for m in memberships if m.tenant_id == tenant_id}
        if org_unit_id in unit_ids:
            return True
        if not include_descendants or not unit_ids:
            return False
        index = await self.org_unit_index(tenant_id)
        return any(unit.id in unit_ids for unit in self._descendants(org_unit_id, index))

    @staticmethod
    def _ancestors(org_unit_id: int, index: Dict[int, OrgUnit]) -> List[OrgUnit]:
        result: List[OrgUnit] = []
        start = index.get(org_unit_id)
        if start is None:
            return result

        visited: Set[int] = {org_unit_id}
        parent_id = start.parent_org_unit_id
        while parent_id is not None:
            if parent_id in visited:
                logger.error(f"Org unit cycle detected at {parent_id} in tenant {start.tenant_id}")
                raise OrgUnitCycleError(
                    f"Org unit hierarchy contains a cycle at {parent_id}",
                    details={"org_unit_id": org_unit_id, "cycle_at": parent_id},
                )
            parent = index.get(parent_id)
            if parent is None:
                logger.warning(f"Org unit {parent_id} referenced as parent but not found in tenant")
                break
            visited.add(parent_id)
            result.append(parent)
            parent_id = parent.parent_org_unit_id
        return result

    @staticmethod
    def _descendants(org_unit_id: int, index: Dict[int, OrgUnit]) -> List[OrgUnit]:
        children: Dict[int, List[OrgUnit]] = {}
        for unit in index.values():
            if unit.parent_org_unit_id is not None:
                children.setdefault(unit.parent_org_unit_id, []).append(unit)

        result: List[OrgUnit] = []
        visited: Set[int] = {org_unit_id}
        queue = deque([org_unit_id])
        while queue:
            for child in children.get(queue.popleft(), []):
                if child.id in visited:
                    raise OrgUnitCycleError(
                        f"Org unit hierarchy contains a cycle at {child.id}",
                        details={"org_unit_id": org_unit_id, "cycle_at": child.id},
                    )
                visited.add(child.id)
                result.append(child)
                queue.append(child.id)
        return result
