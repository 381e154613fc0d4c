"""Operations on the phpIPAM addresses controller."""

from urllib.parse import quote

from ..client import Client
from ..scalars import encode_bool
from ..types import Address


class AddressesController(Client):
    """Client for ``/addresses/``."""

    def create_address(self, address: Address) -> str | None:
        """Create an address and return the service message."""
        return self.send_request("POST", "/addresses/", address, response_type=str)

    def get_address_by_id(self, address_id: int) -> Address:
        return self.send_request(
            "GET",
            f"/addresses/{address_id}/",
            response_type=Address,
        )

    def get_addresses_by_ip(self, ip_address: str) -> list[Address]:
        """Search addresses by IP; one IP can exist in several subnets."""
        return self.send_request(
            "GET",
            f"/addresses/search/{quote(ip_address, safe=':')}/",
            response_type=list[Address],
            default=[],
        )

    def update_address(self, address: Address) -> str | None:
        """Update an address; ``address.id`` selects the entry."""
        return self.send_request("PATCH", "/addresses/", address, response_type=str)

    def delete_address(self, address_id: int, remove_dns: bool = False) -> str | None:
        """Delete an address, optionally removing its DNS records."""
        return self.send_request(
            "DELETE",
            f"/addresses/{address_id}/",
            {"remove_dns": encode_bool(remove_dns)},
            response_type=str,
        )
