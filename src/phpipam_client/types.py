"""Resource records for the phpIPAM API.

Pydantic models mirroring the objects phpIPAM returns. Integers, IDs and
flags use the wire adapters from :mod:`phpipam_client.scalars`, so decoding
accepts the service's stringified values and ``null``, and encoding emits
quoted strings again. Fields are declared under Python names with the wire
name as alias; unknown wire fields such as ``links`` are ignored.
"""

from pydantic import BaseModel, ConfigDict, Field

from .scalars import BoolString, IntString, NullableBoolString, NullableStr


class Record(BaseModel):
    """Base for phpIPAM records."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Section(Record):
    """A phpIPAM section, the top-level container for subnets."""

    id: IntString = 0
    name: NullableStr = ""
    description: NullableStr = ""
    master_section: IntString = Field(0, alias="masterSection")

    # JSON-encoded group permissions, kept as the raw string.
    permissions: NullableStr = ""

    strict_mode: BoolString = Field(False, alias="strictMode")
    subnet_ordering: NullableStr = Field("", alias="subnetOrdering")
    order: IntString = 0
    edit_date: NullableStr = Field("", alias="editDate")
    show_vlan: BoolString = Field(False, alias="showVLAN")
    show_vrf: BoolString = Field(False, alias="showVRF")
    dns: NullableStr = Field("", alias="DNS")


class Subnet(Record):
    """A phpIPAM subnet."""

    id: IntString = 0

    # Network address without mask, e.g. "10.10.1.0".
    subnet_address: NullableStr = Field("", alias="subnet")
    mask: IntString = 0

    section_id: IntString = Field(0, alias="sectionId")
    description: NullableStr = ""
    vrf_id: IntString = Field(0, alias="vrfId")
    master_subnet_id: IntString = Field(0, alias="masterSubnetId")
    allow_requests: BoolString = Field(False, alias="allowRequests")
    vlan_id: IntString = Field(0, alias="vlanId")
    show_name: BoolString = Field(False, alias="showName")
    device: IntString = 0
    permissions: NullableStr = ""
    ping_subnet: BoolString = Field(False, alias="pingSubnet")
    discover_subnet: BoolString = Field(False, alias="discoverSubnet")
    dns_recursive: BoolString = Field(False, alias="DNSrecursive")
    dns_records: BoolString = Field(False, alias="DNSrecords")
    nameserver_id: IntString = Field(0, alias="nameserverId")
    is_folder: BoolString = Field(False, alias="isFolder")
    is_full: BoolString = Field(False, alias="isFull")
    tag: IntString = 0
    edit_date: NullableStr = Field("", alias="editDate")

    @property
    def cidr(self) -> str:
        return f"{self.subnet_address}/{self.mask}"


class Address(Record):
    """An IP address entry inside a subnet."""

    id: IntString = 0
    subnet_id: IntString = Field(0, alias="subnetId")
    ip_address: NullableStr = Field("", alias="ip")
    is_gateway: NullableBoolString = False
    description: NullableStr = ""
    hostname: NullableStr = ""
    mac: NullableStr = ""
    owner: NullableStr = ""
    tag: IntString = 0
    device_id: IntString = Field(0, alias="deviceId")
    port: NullableStr = ""
    note: NullableStr = ""
    exclude_ping: NullableBoolString = Field(False, alias="excludePing")
    ptr_ignore: NullableBoolString = Field(False, alias="PTRignore")
    ptr: IntString = Field(0, alias="PTR")
    edit_date: NullableStr = Field("", alias="editDate")


class VLAN(Record):
    """A phpIPAM VLAN.

    ``id`` is the database entry ID; the VLAN tag itself is ``number``.
    """

    id: IntString = 0
    domain_id: IntString = Field(0, alias="domainId")
    name: NullableStr = ""
    number: IntString = 0
    description: NullableStr = ""
    edit_date: NullableStr = Field("", alias="editDate")
