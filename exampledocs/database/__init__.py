"""Disposable database provisioning, seeding and pooling."""

from .pool import open_pool
from .provisioner import DatabaseProvisioner
from .seed import SUPPLEMENTARY_SQL, fetch_seed_payloads

__all__ = ["DatabaseProvisioner", "SUPPLEMENTARY_SQL", "fetch_seed_payloads", "open_pool"]
