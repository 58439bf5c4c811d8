"""Repository for the Commission aggregate."""

from logistics.commission.commission import Commission
from logistics.domain import logistics


@logistics.repository(part_of=Commission)
class CommissionRepository:
    def find_for_shipment(self, shipment_id: str) -> list[Commission]:
        return self._dao.query.filter(shipment_id=shipment_id).all().items
