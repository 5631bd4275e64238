"""Enums and type aliases for Campusgate."""

from enum import IntEnum, StrEnum


class DeploymentMode(StrEnum):
    SELF_HOSTED = "self_hosted"
    CUSTOM_DOMAIN = "custom_domain"


class Role(IntEnum):
    ADMIN = 1
    TUTOR = 2
    STUDENT = 3


class ProfileStatus(StrEnum):
    ANONYMOUS = "anonymous"
    NEW = "new"
    EXISTING = "existing"
    UNRESOLVED = "unresolved"  # authenticated, but no profile could be loaded or created


class RedirectKind(StrEnum):
    NONE = "none"
    GOTO = "goto"
    REPLACE_EXTERNAL = "replace_external"


class LocalePolicy(StrEnum):
    FIXED = "fixed"
    NEGOTIATED = "negotiated"
