"""Profile and membership provisioning."""

from campusgate.provisioning.provisioner import (
    ProfileProvisioner,
    ProvisionResult,
    build_profile_draft,
)

__all__ = ["ProfileProvisioner", "ProvisionResult", "build_profile_draft"]
