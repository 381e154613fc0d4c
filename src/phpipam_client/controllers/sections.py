"""Operations on the phpIPAM sections controller."""

from urllib.parse import quote

from ..client import Client
from ..types import Section, Subnet


class SectionsController(Client):
    """Client for ``/sections/``."""

    def list_sections(self) -> list[Section]:
        return self.send_request(
            "GET",
            "/sections/",
            response_type=list[Section],
            default=[],
        )

    def create_section(self, section: Section) -> str | None:
        """Create a section and return the service message."""
        return self.send_request("POST", "/sections/", section, response_type=str)

    def get_section_by_id(self, section_id: int) -> Section:
        return self.send_request(
            "GET",
            f"/sections/{section_id}/",
            response_type=Section,
        )

    def get_section_by_name(self, name: str) -> Section:
        """Get a section by name.

        phpIPAM resolves non-numeric identifiers on this path as names.
        """
        return self.send_request(
            "GET",
            f"/sections/{quote(name, safe='')}/",
            response_type=Section,
        )

    def get_subnets_in_section(self, section_id: int) -> list[Subnet]:
        return self.send_request(
            "GET",
            f"/sections/{section_id}/subnets/",
            response_type=list[Subnet],
            default=[],
        )

    def update_section(self, section: Section) -> str | None:
        """Update a section; ``section.id`` selects the entry.

        Returns:
            The service message, or None (this endpoint usually sends none).
        """
        return self.send_request("PATCH", "/sections/", section, response_type=str)

    def delete_section(self, section_id: int) -> str | None:
        return self.send_request(
            "DELETE",
            "/sections/",
            Section(id=section_id),
            response_type=str,
        )
