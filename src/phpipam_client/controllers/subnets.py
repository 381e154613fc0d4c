"""Operations on the phpIPAM subnets controller."""

from urllib.parse import quote

from ..client import Client
from ..types import Address, Subnet


class SubnetsController(Client):
    """Client for ``/subnets/``."""

    def create_subnet(self, subnet: Subnet) -> str | None:
        """Create a subnet and return the service message."""
        return self.send_request("POST", "/subnets/", subnet, response_type=str)

    def get_subnet_by_id(self, subnet_id: int) -> Subnet:
        return self.send_request("GET", f"/subnets/{subnet_id}/", response_type=Subnet)

    def get_subnets_by_cidr(self, cidr: str) -> list[Subnet]:
        """Search subnets by CIDR, e.g. ``"10.10.1.0/24"``.

        The address and mask are separate path segments on this route.
        """
        address, _, mask = cidr.partition("/")
        path = f"/subnets/cidr/{quote(address, safe=':')}/"
        if mask:
            path += f"{quote(mask, safe='')}/"
        return self.send_request(
            "GET",
            path,
            response_type=list[Subnet],
            default=[],
        )

    def get_addresses_in_subnet(self, subnet_id: int) -> list[Address]:
        return self.send_request(
            "GET",
            f"/subnets/{subnet_id}/addresses/",
            response_type=list[Address],
            default=[],
        )

    def update_subnet(self, subnet: Subnet) -> str | None:
        """Update a subnet; ``subnet.id`` selects the entry.

        The service rejects address and mask changes, so leave
        ``subnet_address`` and ``mask`` unset.
        """
        return self.send_request("PATCH", "/subnets/", subnet, response_type=str)

    def delete_subnet(self, subnet_id: int) -> str | None:
        return self.send_request("DELETE", f"/subnets/{subnet_id}/", response_type=str)
