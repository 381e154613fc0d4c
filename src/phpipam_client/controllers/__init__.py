"""Controllers for phpIPAM resources.

Each module wraps one phpIPAM controller (sections, subnets, addresses,
VLANs) as a thin :class:`~phpipam_client.client.Client` subclass. Build them
on a shared :class:`~phpipam_client.session.Session` so they reuse one login.
"""
