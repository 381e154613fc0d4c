"""Operations on the phpIPAM VLAN controller."""

from ..client import Client
from ..types import VLAN, Subnet


class VLANsController(Client):
    """Client for ``/vlans/``."""

    def create_vlan(self, vlan: VLAN) -> str | None:
        """Create a VLAN and return the service message."""
        return self.send_request("POST", "/vlans/", vlan, response_type=str)

    def get_vlan_by_id(self, vlan_id: int) -> VLAN:
        """Get a VLAN by database entry ID (not the VLAN number)."""
        return self.send_request("GET", f"/vlans/{vlan_id}/", response_type=VLAN)

    def get_vlans_by_number(self, number: int) -> list[VLAN]:
        """Search VLANs by number; several L2 domains may reuse a number."""
        return self.send_request(
            "GET",
            f"/vlans/search/{number}/",
            response_type=list[VLAN],
            default=[],
        )

    def get_subnets_in_vlan(self, vlan_id: int) -> list[Subnet]:
        return self.send_request(
            "GET",
            f"/vlans/{vlan_id}/subnets/",
            response_type=list[Subnet],
            default=[],
        )

    def update_vlan(self, vlan: VLAN) -> str | None:
        """Update a VLAN; ``vlan.id`` selects the entry."""
        return self.send_request("PATCH", "/vlans/", vlan, response_type=str)

    def delete_vlan(self, vlan_id: int) -> str | None:
        return self.send_request(
            "DELETE",
            "/vlans/",
            VLAN(id=vlan_id),
            response_type=str,
        )
